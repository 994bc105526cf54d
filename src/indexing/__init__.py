"""In-memory indexes and queries over publication collections."""

from .index import (
    ORGANISM_KEYWORDS,
    OTHER_LABEL,
    STOP_WORDS,
    Organism,
    PublicationIndex,
    build_index,
    match_organisms,
    tokenize,
)
from .queries import (
    RESEARCH_AREAS,
    AreaCoverage,
    DatasetSummary,
    Kpis,
    OrganismStats,
    Page,
    PaperNotFound,
    YearCount,
    available_year_range,
    calculate_relevance_score,
    filter_by_organism,
    filter_by_year_range,
    get_dataset_summary,
    get_kpis,
    get_organism_stats,
    get_paper_at,
    get_papers_per_year,
    get_papers_per_year_by_organism,
    get_research_area_coverage,
    get_top_papers_by_relevance,
    organism_options,
    paginate,
    search_papers,
)
from .service import PublicationExplorer

__all__ = [
    "AreaCoverage",
    "DatasetSummary",
    "Kpis",
    "ORGANISM_KEYWORDS",
    "OTHER_LABEL",
    "Organism",
    "OrganismStats",
    "Page",
    "PaperNotFound",
    "PublicationExplorer",
    "PublicationIndex",
    "RESEARCH_AREAS",
    "STOP_WORDS",
    "YearCount",
    "available_year_range",
    "build_index",
    "calculate_relevance_score",
    "filter_by_organism",
    "filter_by_year_range",
    "get_dataset_summary",
    "get_kpis",
    "get_organism_stats",
    "get_paper_at",
    "get_papers_per_year",
    "get_papers_per_year_by_organism",
    "get_research_area_coverage",
    "get_top_papers_by_relevance",
    "match_organisms",
    "organism_options",
    "paginate",
    "search_papers",
    "tokenize",
]
