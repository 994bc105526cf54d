from __future__ import annotations

from dataclasses import asdict, dataclass
from math import ceil
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from src.ingestion.models import Publication

from .index import (
    OTHER_LABEL,
    Organism,
    PublicationIndex,
    build_index,
    matches_any_organism,
    matches_organism,
    organism_counts,
    unique_in_order,
)

DEFAULT_TOP_LIMIT = 10
DEFAULT_PAGE_SIZE = 20

TITLE_MATCH_WEIGHT = 3
TEXT_MATCH_WEIGHT = 1


@dataclass(frozen=True)
class Kpis:
    total: int
    year_min: int
    year_max: int
    organisms_count: int
    median_year: int


@dataclass(frozen=True)
class OrganismStats:
    mouse: int
    human: int
    plant: int
    drosophila: int
    microbe: int
    other: int

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class YearCount:
    year: int
    count: int


@dataclass(frozen=True)
class Page:
    items: List[Publication]
    page: int
    page_size: int
    total: int
    total_pages: int

    @property
    def start(self) -> int:
        """1-based position of the first item on the page (0 when empty)."""
        return (self.page - 1) * self.page_size + 1 if self.items else 0

    @property
    def end(self) -> int:
        return min(self.page * self.page_size, self.total)


def _known_years(records: Iterable[Publication]) -> List[int]:
    return sorted(r.year for r in records if r.year is not None)


def search_papers(
    records: Sequence[Publication],
    query: str,
    *,
    index: Optional[PublicationIndex] = None,
) -> List[Publication]:
    """Keyword search over the title/summary index.

    Each whitespace-separated query term matches an index key exactly or as a
    substring of it. The result is the union of matches in index traversal
    order, not input order. A blank query returns the records unchanged.
    """
    terms = query.lower().split()
    if not terms:
        return list(records)

    by_keyword = (index or build_index(records)).by_keyword
    groups: List[List[Publication]] = []
    for term in terms:
        exact = by_keyword.get(term)
        if exact:
            groups.append(exact)
        for keyword, bucket in by_keyword.items():
            if term in keyword:
                groups.append(bucket)
    return unique_in_order(groups)


def filter_by_organism(
    records: Sequence[Publication],
    organisms: Sequence[Organism | str],
    *,
    index: Optional[PublicationIndex] = None,
) -> List[Publication]:
    if not organisms:
        return list(records)

    index = index or build_index(records)
    return unique_in_order(index.organism_bucket(organism) for organism in organisms)


def filter_by_year_range(
    records: Iterable[Publication], min_year: int, max_year: int
) -> List[Publication]:
    return [r for r in records if r.year is not None and min_year <= r.year <= max_year]


def available_year_range(records: Iterable[Publication]) -> Tuple[int, int]:
    years = _known_years(records)
    if not years:
        return 0, 0
    return years[0], years[-1]


def get_kpis(records: Sequence[Publication], *, index: Optional[PublicationIndex] = None) -> Kpis:
    years = _known_years(records)
    year_min, year_max = (years[0], years[-1]) if years else (0, 0)
    # Element at n // 2 of the sorted years, not the averaged median.
    median_year = years[len(years) // 2] if years else 0

    return Kpis(
        total=len(records),
        year_min=year_min,
        year_max=year_max,
        organisms_count=len((index or build_index(records)).by_organism),
        median_year=median_year,
    )


def get_organism_stats(
    records: Sequence[Publication], *, index: Optional[PublicationIndex] = None
) -> OrganismStats:
    counts = organism_counts(index or build_index(records))
    # Records tagged with several organisms are counted once per tag, so
    # ``other`` is not corrected for overlaps and may go negative.
    other = len(records) - sum(counts.values())
    return OrganismStats(
        mouse=counts[Organism.MOUSE],
        human=counts[Organism.HUMAN],
        plant=counts[Organism.PLANT],
        drosophila=counts[Organism.DROSOPHILA],
        microbe=counts[Organism.MICROBE],
        other=other,
    )


def organism_options(
    records: Sequence[Publication], *, index: Optional[PublicationIndex] = None
) -> Dict[Organism, int]:
    """Organisms with at least one matching record, with their counts."""
    counts = organism_counts(index or build_index(records))
    return {organism: count for organism, count in counts.items() if count > 0}


def get_papers_per_year(
    records: Sequence[Publication], *, index: Optional[PublicationIndex] = None
) -> List[YearCount]:
    index = index or build_index(records)
    return [YearCount(year=year, count=len(index.by_year[year])) for year in index.years()]


def get_papers_per_year_by_organism(
    records: Sequence[Publication], *, index: Optional[PublicationIndex] = None
) -> Dict[str, List[YearCount]]:
    """One yearly series per organism plus ``other`` for records matching none.

    Every series spans all indexed years, zero counts included.
    """
    index = index or build_index(records)
    years = index.years()

    series: Dict[str, List[YearCount]] = {}
    for organism in Organism:
        series[organism.value] = [
            YearCount(
                year=year,
                count=sum(1 for r in index.by_year[year] if matches_organism(r.text, organism)),
            )
            for year in years
        ]
    series[OTHER_LABEL] = [
        YearCount(year=year, count=sum(1 for r in index.by_year[year] if not matches_any_organism(r)))
        for year in years
    ]
    return series


def calculate_relevance_score(publication: Publication, keywords: Iterable[str]) -> int:
    """Score a record against keywords.

    A keyword in the title adds 3; a keyword anywhere in title or summary adds
    1. Both rules apply independently, so a title hit is worth 4.
    """
    title = publication.title.lower()
    text = publication.text
    score = 0
    for keyword in keywords:
        needle = keyword.lower()
        if needle in title:
            score += TITLE_MATCH_WEIGHT
        if needle in text:
            score += TEXT_MATCH_WEIGHT
    return score


def get_top_papers_by_relevance(
    records: Iterable[Publication],
    keywords: Sequence[str],
    limit: int = DEFAULT_TOP_LIMIT,
) -> List[Publication]:
    scored = [(record, calculate_relevance_score(record, keywords)) for record in records]
    scored = [entry for entry in scored if entry[1] > 0]
    scored.sort(key=lambda entry: entry[1], reverse=True)
    return [record for record, _ in scored[: max(limit, 0)]]


def paginate(
    records: Sequence[Publication],
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Page:
    """Slice a result list into a 1-based page, clamping out-of-range pages."""
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")

    total = len(records)
    total_pages = ceil(total / page_size)
    current = min(max(page, 1), max(total_pages, 1))
    start = (current - 1) * page_size
    return Page(
        items=list(records[start : start + page_size]),
        page=current,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
    )


# --------------------------
# Insights
# --------------------------

RESEARCH_AREAS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Bone/Skeletal", ("bone", "skeletal", "osteoporosis", "osteoclast", "osteoblast", "calcium")),
    ("Cardiovascular", ("cardiovascular", "heart", "blood pressure", "circulation", "cardiac")),
    ("Immune", ("immune", "immunity", "lymphocyte", "antibody", "inflammation", "resistance")),
    ("Neuro/CNS", ("neuro", "neural", "brain", "cns", "cognitive", "memory", "neuron")),
    ("Microbiome/Host-Microbe", ("microbiome", "microbe", "bacteria", "gut", "microbial", "flora")),
)

RECENT_WINDOW_YEARS = 5
STRONG_ACTIVITY_SHARE = 0.3


class PaperNotFound(LookupError):
    """No record at the requested list position."""


@dataclass(frozen=True)
class AreaCoverage:
    name: str
    percent: float


@dataclass(frozen=True)
class DatasetSummary:
    total: int
    year_min: int
    year_max: int
    year_span: int
    average_per_year: float
    top_organism: Optional[str]
    top_organism_count: int
    recent_count: int
    recent_percent: float

    @property
    def activity(self) -> str:
        return "strong" if self.recent_count > self.total * STRONG_ACTIVITY_SHARE else "moderate"


def get_research_area_coverage(
    records: Sequence[Publication],
    areas: Sequence[Tuple[str, Sequence[str]]] = RESEARCH_AREAS,
    *,
    index: Optional[PublicationIndex] = None,
) -> List[AreaCoverage]:
    """Percent of year-indexed records whose text mentions any keyword of each area.

    Records without a year are left out of both the hits and the denominator.
    """
    index = index or build_index(records)
    dated = [r for year in index.years() for r in index.by_year[year]]

    coverage: List[AreaCoverage] = []
    for name, keywords in areas:
        hits = sum(1 for r in dated if any(keyword in r.text for keyword in keywords))
        percent = hits / len(dated) * 100 if dated else 0.0
        coverage.append(AreaCoverage(name=name, percent=percent))
    return coverage


def get_dataset_summary(
    records: Sequence[Publication], *, index: Optional[PublicationIndex] = None
) -> DatasetSummary:
    index = index or build_index(records)
    kpis = get_kpis(records, index=index)
    total = kpis.total
    year_span = kpis.year_max - kpis.year_min
    # A single-year collection averages over that one year.
    average = total / year_span if year_span > 0 else float(total)

    stats = get_organism_stats(records, index=index).as_dict()
    ranked = sorted(
        ((label, count) for label, count in stats.items() if count > 0),
        key=lambda entry: entry[1],
        reverse=True,
    )
    top_label, top_count = ranked[0] if ranked else (None, 0)

    recent_from = kpis.year_max - RECENT_WINDOW_YEARS
    recent_count = sum(1 for r in records if r.year and r.year >= recent_from)

    return DatasetSummary(
        total=total,
        year_min=kpis.year_min,
        year_max=kpis.year_max,
        year_span=year_span,
        average_per_year=average,
        top_organism=top_label,
        top_organism_count=top_count,
        recent_count=recent_count,
        recent_percent=recent_count / total * 100 if total else 0.0,
    )


def get_paper_at(records: Sequence[Publication], position: int) -> Publication:
    """Record at a 0-based list position, as linked from a results table."""
    if not 0 <= position < len(records):
        raise PaperNotFound(f"Paper not found at position {position}")
    return records[position]
