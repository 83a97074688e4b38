"""
Dataset loader for the Session Emotion Heatmap.

Reads a JSON array of ``{"x": number, "y": number, "scope": string}``
records from a file path or an ``http(s)://`` URL and assembles a
``Dataset``.  Handles:

- UTF-8 BOM markers
- Records without ``scope`` (inherit the requested scope)
- Malformed records (skipped with a warning)
- Unreachable or unparsable sources (logged, dataset left unset)
"""

import json
import logging
import math
import os
import warnings
from typing import List, Optional
from urllib.error import URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from .constants import FETCH_TIMEOUT_SECONDS
from .data_model import Dataset, SamplePoint, Scope

logger = logging.getLogger(__name__)


class DataFetchFailure(Exception):
    """A dataset source could not be read or did not hold a JSON array."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


# ── Raw fetch ────────────────────────────────────────────────────────────

def _is_url(source: str) -> bool:
    return urlparse(source).scheme in ('http', 'https')


def _read_text(source: str, timeout: float) -> str:
    if _is_url(source):
        request = Request(source, headers={'Accept': 'application/json'})
        with urlopen(request, timeout=timeout) as response:
            charset = response.headers.get_content_charset() or 'utf-8'
            return response.read().decode(charset)
    with open(source, 'r', encoding='utf-8-sig') as fh:
        return fh.read()


def fetch_samples(source: str, *, timeout: float = FETCH_TIMEOUT_SECONDS) -> list:
    """Fetch and decode the JSON document at *source*.

    Raises
    ------
    DataFetchFailure
        If the source is unreachable, unreadable, not valid JSON, or
        does not hold a JSON array.
    """
    try:
        text = _read_text(source, timeout)
    except (URLError, OSError, UnicodeDecodeError, LookupError) as exc:
        raise DataFetchFailure(source, f"could not read ({exc})") from exc

    try:
        payload = json.loads(text.lstrip("\ufeff"))
    except json.JSONDecodeError as exc:
        raise DataFetchFailure(source, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc

    if not isinstance(payload, list):
        raise DataFetchFailure(
            source, f"expected a JSON array, got {type(payload).__name__}"
        )
    return payload


# ── Record parsing ───────────────────────────────────────────────────────

def _coordinate(record: dict, key: str) -> float:
    value = record[key]
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key!r} is not a number: {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"non-finite {key!r}: {value!r}")
    return value


def parse_samples(records: list, scope: Scope, *, source: str = '') -> Dataset:
    """Convert decoded JSON records into a ``Dataset`` of *scope*.

    Records that are not objects, lack ``x``/``y``, hold non-numeric or
    non-finite coordinates, or name a different scope are skipped with
    a warning.
    """
    label = os.path.basename(source) if source and not _is_url(source) else source
    points: List[SamplePoint] = []
    skipped = 0

    for index, record in enumerate(records):
        try:
            if not isinstance(record, dict):
                raise ValueError(f"expected an object, got {type(record).__name__}")
            x = _coordinate(record, 'x')
            y = _coordinate(record, 'y')
            record_scope = Scope.parse(record['scope']) if 'scope' in record else scope
        except (KeyError, ValueError) as exc:
            skipped += 1
            warnings.warn(
                f"Record {index} in '{label or scope.value}' is malformed "
                f"({exc}), skipping.",
                stacklevel=2,
            )
            continue

        if record_scope is not scope:
            skipped += 1
            warnings.warn(
                f"Record {index} in '{label or scope.value}' has scope "
                f"'{record_scope.value}', expected '{scope.value}', skipping.",
                stacklevel=2,
            )
            continue

        points.append(SamplePoint(x, y, scope))

    if skipped:
        logger.info("Skipped %d of %d records from %s", skipped, len(records), label or scope.value)
    return Dataset(scope=scope, points=tuple(points), source=source)


# ── Public entry point ───────────────────────────────────────────────────

def load_dataset(
    source: str,
    scope: Scope,
    *,
    timeout: float = FETCH_TIMEOUT_SECONDS,
) -> Optional[Dataset]:
    """Load one dataset, or return ``None`` when the source fails.

    A fetch failure is logged rather than raised; the caller keeps the
    dataset unset and skips rendering until both datasets are present.
    """
    try:
        records = fetch_samples(source, timeout=timeout)
    except DataFetchFailure as exc:
        logger.error("Error fetching %s dataset: %s", scope.value, exc)
        return None

    dataset = parse_samples(records, scope, source=source)
    logger.info("Loaded %d %s samples from %s", len(dataset), scope.value, source)
    return dataset
