from __future__ import annotations

import json
import logging
import math
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import requests

from .models import Publication, RawPublication

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"
DEFAULT_TIMEOUT_S = 30

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class LoadError(RuntimeError):
    """Raised when the raw publications source cannot be fetched or parsed."""


def coerce_year(value: Any) -> Optional[int]:
    """
    Coerce a raw year into an int, or None when it cannot be interpreted.

    Numbers are accepted as-is (floats truncated), strings are parsed from
    their leading integer ("2010", " 2010 ", "2010-05" -> 2010). Booleans,
    NaN/inf and anything else map to None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return None


def _coerce_text(value: Any, default: str) -> str:
    if not value:
        return default
    return value if isinstance(value, str) else str(value)


def _coerce_authors(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(a if isinstance(a, str) else str(a) for a in value if a is not None)


def normalize_record(item: Any) -> Publication:
    raw = RawPublication.model_validate(item if isinstance(item, Mapping) else {})
    return Publication(
        title=_coerce_text(raw.title, UNTITLED),
        authors=_coerce_authors(raw.authors),
        year=coerce_year(raw.year),
        summary=_coerce_text(raw.summary, ""),
        link=_coerce_text(raw.link, ""),
    )


def deduplicate(records: Iterable[Publication]) -> Tuple[List[Publication], Dict[str, int]]:
    """Keep the first record per normalized title.

    Returns ``(records, stats)`` where stats carries ``input_count``,
    ``duplicates_dropped`` and ``output_count``.
    """

    seen: set[str] = set()
    unique: List[Publication] = []
    input_count = 0
    for record in records:
        input_count += 1
        key = record.dedup_key
        if key in seen:
            logger.debug("Dropping duplicate publication %r", record.title)
            continue
        seen.add(key)
        unique.append(record)

    stats = {
        "input_count": input_count,
        "duplicates_dropped": input_count - len(unique),
        "output_count": len(unique),
    }
    return unique, stats


def load_publications(raw_items: Sequence[Any]) -> List[Publication]:
    records, stats = deduplicate(normalize_record(item) for item in raw_items)
    logger.info(
        "Loaded %d publications (%d duplicates dropped)",
        stats["output_count"],
        stats["duplicates_dropped"],
    )
    return records


def _require_array(payload: Any, source: str) -> List[Any]:
    if not isinstance(payload, list):
        raise LoadError(f"Publications source {source} must contain a JSON array")
    return payload


def load_publications_from_path(path: Path | str) -> List[Publication]:
    source_path = Path(path)
    try:
        payload = json.loads(source_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise LoadError(f"Could not read publications from {source_path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise LoadError(f"Publications file {source_path} is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise LoadError(f"Publications file {source_path} is not valid JSON: {exc}") from exc
    return load_publications(_require_array(payload, str(source_path)))


def load_publications_from_url(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout_s: float = DEFAULT_TIMEOUT_S,
) -> List[Publication]:
    """Fetch the publications array over HTTP. One attempt, no retries."""

    http = session or requests.Session()
    logger.info("Fetching publications from %s", url)
    try:
        r = http.get(url, timeout=timeout_s)
    except requests.RequestException as exc:
        raise LoadError(f"Failed to fetch publications from {url}: {exc}") from exc
    if r.status_code != 200:
        raise LoadError(f"Failed to fetch publications from {url}: HTTP {r.status_code}")
    try:
        payload = r.json()
    except ValueError as exc:
        raise LoadError(f"Publications at {url} are not valid JSON: {exc}") from exc
    return load_publications(_require_array(payload, url))


def load_publications_from_source(source: str, **kwargs: Any) -> List[Publication]:
    if source.startswith(("http://", "https://")):
        return load_publications_from_url(source, **kwargs)
    return load_publications_from_path(source)
