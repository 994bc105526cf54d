from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from src.ingestion.models import Publication


class Organism(str, Enum):
    MOUSE = "mouse"
    HUMAN = "human"
    PLANT = "plant"
    DROSOPHILA = "drosophila"
    MICROBE = "microbe"


OTHER_LABEL = "other"

# Substring matches against the lower-cased title + summary.
ORGANISM_KEYWORDS: Mapping[Organism, Tuple[str, ...]] = {
    Organism.MOUSE: ("mouse", "mice", "murine", "rodent"),
    Organism.HUMAN: ("human", "humanity", "patient", "clinical", "humans"),
    Organism.PLANT: ("plant", "arabidopsis", "seedling", "vegetation", "botanical"),
    Organism.DROSOPHILA: ("drosophila", "fruit fly", "flies"),
    Organism.MICROBE: ("bacteria", "microbe", "microbial", "fungal", "virus", "pathogen", "microbiome"),
}

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
        "by", "from", "up", "about", "into", "through", "during", "before", "after",
        "above", "below", "between", "among", "is", "are", "was", "were", "be", "been",
        "being", "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "must", "can", "this", "that", "these", "those",
        "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
    }
)

MIN_TOKEN_LENGTH = 3


def tokenize(text: str) -> List[str]:
    """Split text into index tokens: lower-cased, whitespace-delimited, no stop words or short tokens."""
    return [
        token
        for token in text.lower().split()
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOP_WORDS
    ]


def matches_organism(text: str, organism: Organism) -> bool:
    return any(keyword in text for keyword in ORGANISM_KEYWORDS[organism])


def match_organisms(publication: Publication) -> List[Organism]:
    text = publication.text
    return [organism for organism in Organism if matches_organism(text, organism)]


def matches_any_organism(publication: Publication) -> bool:
    text = publication.text
    return any(matches_organism(text, organism) for organism in Organism)


@dataclass(frozen=True)
class PublicationIndex:
    """Lookup tables over a publication collection.

    Bucket order follows the input order. Records without a year are absent
    from ``by_year``; organism buckets only exist once they have a member.
    """

    by_year: Dict[int, List[Publication]] = field(default_factory=dict)
    by_keyword: Dict[str, List[Publication]] = field(default_factory=dict)
    by_organism: Dict[Organism, List[Publication]] = field(default_factory=dict)

    def organism_bucket(self, organism: Organism | str) -> List[Publication]:
        try:
            key = Organism(organism)
        except ValueError:
            return []
        return self.by_organism.get(key, [])

    def years(self) -> List[int]:
        return sorted(self.by_year)


def build_index(records: Iterable[Publication]) -> PublicationIndex:
    by_year: Dict[int, List[Publication]] = {}
    by_keyword: Dict[str, List[Publication]] = {}
    by_organism: Dict[Organism, List[Publication]] = {}

    for record in records:
        if record.year is not None:
            by_year.setdefault(record.year, []).append(record)

        # A token repeated within one record is appended once per occurrence.
        for token in tokenize(record.text):
            by_keyword.setdefault(token, []).append(record)

        for organism in match_organisms(record):
            by_organism.setdefault(organism, []).append(record)

    return PublicationIndex(by_year=by_year, by_keyword=by_keyword, by_organism=by_organism)


def organism_counts(index: PublicationIndex) -> Dict[Organism, int]:
    return {organism: len(index.by_organism.get(organism, [])) for organism in Organism}


def unique_in_order(groups: Iterable[Sequence[Publication]]) -> List[Publication]:
    """Flatten buckets, keeping each record object once (first occurrence wins)."""
    seen: Dict[int, Publication] = {}
    for group in groups:
        for record in group:
            if id(record) not in seen:
                seen[id(record)] = record
    return list(seen.values())
