"""
Example data generator for the Session Emotion Heatmap.

Creates ``local-heatmap.json`` and ``global-heatmap.json`` with
synthetic session positions for testing and demonstration.  The global
population spreads over most emotions; the local session concentrates
around two of them so that the skew control has a visible effect.
A handful of samples sit exactly on the unit-square edge to exercise
the boundary handling.
"""

import json
import os
import random

from .annotations import find_annotation
from .constants import GLOBAL_DATASET_NAME, LOCAL_DATASET_NAME


# (emotion name, share of samples, spread)
_GLOBAL_CLUSTERS = [
    ('neutral', 0.30, 0.12),
    ('relaxed', 0.18, 0.08),
    ('joy', 0.14, 0.07),
    ('excited', 0.12, 0.07),
    ('bored', 0.12, 0.08),
    ('annoyed', 0.08, 0.06),
    ('anxious', 0.06, 0.06),
]

_LOCAL_CLUSTERS = [
    ('excited', 0.55, 0.05),
    ('alarmed', 0.35, 0.06),
    ('neutral', 0.10, 0.10),
]


def _clip_unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _sample_clusters(rng: random.Random, clusters, n: int, scope: str) -> list:
    records = []
    for name, share, spread in clusters:
        cx, cy = find_annotation(name).position
        for _ in range(max(1, round(n * share))):
            records.append({
                'x': round(_clip_unit(rng.gauss(cx, spread)), 4),
                'y': round(_clip_unit(rng.gauss(cy, spread)), 4),
                'scope': scope,
            })
    rng.shuffle(records)
    return records


def generate_example_records(n_local: int = 300, n_global: int = 3000, seed: int = 42):
    """Return ``(local_records, global_records)`` as JSON-ready lists."""
    rng = random.Random(seed)
    local = _sample_clusters(rng, _LOCAL_CLUSTERS, n_local, 'local')
    global_ = _sample_clusters(rng, _GLOBAL_CLUSTERS, n_global, 'global')
    # Edge samples
    global_.extend([
        {'x': 1.0, 'y': 0.5, 'scope': 'global'},
        {'x': 0.5, 'y': 1.0, 'scope': 'global'},
    ])
    return local, global_


def generate_example_json(output_dir: str, **kwargs) -> dict:
    """Write the two example datasets into *output_dir*.

    Returns
    -------
    dict
        ``{"local": path, "global": path}``
    """
    os.makedirs(output_dir, exist_ok=True)
    local, global_ = generate_example_records(**kwargs)

    paths = {
        'local': os.path.join(output_dir, LOCAL_DATASET_NAME),
        'global': os.path.join(output_dir, GLOBAL_DATASET_NAME),
    }
    for key, records in (('local', local), ('global', global_)):
        with open(paths[key], 'w', encoding='utf-8') as fh:
            json.dump(records, fh)
    return paths


if __name__ == '__main__':
    import tempfile
    out = os.path.join(tempfile.gettempdir(), 'emotion_heatmap_example')
    result = generate_example_json(out)
    for k, v in result.items():
        print(f"  {k}: {v}")
