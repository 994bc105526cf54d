from __future__ import annotations

from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class RawPublication(BaseModel):
    """
    Loosely-typed view of one entry of the publications JSON array.

    Nothing is validated here beyond the field names; coercion into a
    ``Publication`` happens in the loader so that one bad record never
    rejects the batch.
    """

    model_config = ConfigDict(extra="ignore")

    title: Any = None
    authors: Any = None
    year: Any = None
    summary: Any = None
    link: Any = None


class Publication(BaseModel):
    """Normalized, immutable bibliographic record."""

    model_config = ConfigDict(frozen=True)

    title: str
    authors: Tuple[str, ...] = ()
    year: Optional[int] = Field(default=None, description="Publication year, None when unknown.")
    summary: str = ""
    link: str = ""

    @property
    def text(self) -> str:
        """Lower-cased ``title + summary`` used for keyword and organism matching."""
        return f"{self.title} {self.summary}".lower()

    @property
    def dedup_key(self) -> str:
        return self.title.strip().lower()

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "authors": list(self.authors),
            "year": self.year,
            "summary": self.summary,
            "link": self.link,
        }
