from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from src.ingestion.models import Publication

from . import queries
from .index import Organism, PublicationIndex, build_index
from .queries import AreaCoverage, DatasetSummary, Kpis, OrganismStats, Page, YearCount

logger = logging.getLogger(__name__)


class PublicationExplorer:
    """
    Query service over one loaded publication collection.

    Build one per loaded collection and hand it to consumers. The index over
    the full collection is memoized against a version counter that
    ``reload`` bumps, so a replaced collection is never answered from the
    previous index. Filtered subsets are indexed on demand.
    """

    def __init__(self, records: Iterable[Publication], *, page_size: int = queries.DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.page_size = page_size
        self._records: Tuple[Publication, ...] = tuple(records)
        self._version = 0
        self._index: Optional[PublicationIndex] = None
        self._index_version = -1

    @property
    def records(self) -> Tuple[Publication, ...]:
        return self._records

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return len(self._records)

    def reload(self, records: Iterable[Publication]) -> None:
        self._records = tuple(records)
        self._version += 1
        self._index = None
        logger.debug("Reloaded explorer with %d records (version %d)", len(self._records), self._version)

    @property
    def index(self) -> PublicationIndex:
        if self._index is None or self._index_version != self._version:
            self._index = build_index(self._records)
            self._index_version = self._version
        return self._index

    # --------------------------
    # Queries over the full collection
    # --------------------------

    def search(self, query: str) -> List[Publication]:
        return queries.search_papers(self._records, query, index=self.index)

    def filter_by_organism(self, organisms: Sequence[Organism | str]) -> List[Publication]:
        return queries.filter_by_organism(self._records, organisms, index=self.index)

    def filter_by_year_range(self, min_year: int, max_year: int) -> List[Publication]:
        return queries.filter_by_year_range(self._records, min_year, max_year)

    def kpis(self) -> Kpis:
        return queries.get_kpis(self._records, index=self.index)

    def organism_stats(self) -> OrganismStats:
        return queries.get_organism_stats(self._records, index=self.index)

    def organism_options(self) -> Dict[Organism, int]:
        return queries.organism_options(self._records, index=self.index)

    def papers_per_year(self) -> List[YearCount]:
        return queries.get_papers_per_year(self._records, index=self.index)

    def papers_per_year_by_organism(self) -> Dict[str, List[YearCount]]:
        return queries.get_papers_per_year_by_organism(self._records, index=self.index)

    def year_range(self) -> Tuple[int, int]:
        return queries.available_year_range(self._records)

    def top_by_relevance(self, keywords: Sequence[str], limit: int = queries.DEFAULT_TOP_LIMIT) -> List[Publication]:
        return queries.get_top_papers_by_relevance(self._records, keywords, limit)

    def research_area_coverage(self) -> List[AreaCoverage]:
        return queries.get_research_area_coverage(self._records, index=self.index)

    def dataset_summary(self) -> DatasetSummary:
        return queries.get_dataset_summary(self._records, index=self.index)

    def paper_at(self, position: int) -> Publication:
        return queries.get_paper_at(self._records, position)

    # --------------------------
    # Combined explorer view
    # --------------------------

    def explore(
        self,
        *,
        query: str = "",
        organisms: Sequence[Organism | str] = (),
        min_year: Optional[int] = None,
        max_year: Optional[int] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> Page:
        """
        Search, then organism filter, then year range, then paginate.

        Year bounds default to the collection's available range, so records
        with an unknown year never appear in the explorer view.
        """
        default_min, default_max = self.year_range()
        low = default_min if min_year is None else min_year
        high = default_max if max_year is None else max_year

        results: Sequence[Publication] = self._records
        if query.strip():
            results = self.search(query)
        if organisms:
            if results is self._records:
                results = self.filter_by_organism(organisms)
            else:
                results = queries.filter_by_organism(results, organisms)
        results = queries.filter_by_year_range(results, low, high)

        return queries.paginate(results, page=page, page_size=page_size or self.page_size)
