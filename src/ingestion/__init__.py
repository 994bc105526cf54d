"""Loading and normalization of raw publication records."""

from .loader import (
    LoadError,
    coerce_year,
    deduplicate,
    load_publications,
    load_publications_from_path,
    load_publications_from_source,
    load_publications_from_url,
    normalize_record,
)
from .models import Publication, RawPublication

__all__ = [
    "LoadError",
    "Publication",
    "RawPublication",
    "coerce_year",
    "deduplicate",
    "load_publications",
    "load_publications_from_path",
    "load_publications_from_source",
    "load_publications_from_url",
    "normalize_record",
]
