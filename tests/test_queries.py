import pytest

from src.indexing.index import Organism, build_index
from src.indexing.queries import (
    AreaCoverage,
    Kpis,
    OrganismStats,
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
from src.ingestion.loader import load_publications
from src.ingestion.models import Publication


def _titles(records):
    return [r.title for r in records]


# --------------------------
# Search
# --------------------------


def test_blank_query_returns_input_unchanged(corpus):
    assert search_papers(corpus, "") == corpus
    assert search_papers(corpus, "   \t") == corpus


def test_search_returns_union_of_terms(corpus, execution_log):
    result = search_papers(corpus, "mice immune")

    assert _titles(result) == ["Bone Loss in Mice", "Immune Study"]
    execution_log.record("Keyword search", "'mice immune' returns the union of both term matches")


def test_search_union_property_has_no_duplicates(corpus):
    combined = search_papers(corpus, "mouse rat")
    mouse = search_papers(corpus, "mouse")
    rat = search_papers(corpus, "rat")

    assert len(combined) == len({id(r) for r in combined})
    assert {id(r) for r in combined} == {id(r) for r in mouse} | {id(r) for r in rat}


def test_search_matches_index_keys_by_substring(corpus):
    # "grav" only occurs inside the indexed token "microgravity".
    result = search_papers(corpus, "GRAV")

    assert _titles(result) == ["Bone Loss in Mice", "Arabidopsis Seedling Growth"]


def test_search_keeps_short_query_terms(corpus):
    # "in" is dropped at index time but still matches keys such as "murine" or "seedling".
    result = search_papers(corpus, "in")

    assert _titles(result) == [
        "Bone Loss in Mice",
        "Arabidopsis Seedling Growth",
        "Radiation shielding materials",
    ]


def test_search_order_follows_index_traversal_not_input(corpus):
    result = search_papers(corpus, "study bone")

    assert _titles(result) == [
        "Immune Study",
        "Mouse and human muscle atrophy",
        "Bone Loss in Mice",
    ]


def test_search_with_no_matches_is_empty(corpus):
    assert search_papers(corpus, "telescope") == []


# --------------------------
# Filters
# --------------------------


def test_filter_by_organism_unions_buckets(corpus):
    assert _titles(filter_by_organism(corpus, ["mouse"])) == [
        "Bone Loss in Mice",
        "Mouse and human muscle atrophy",
    ]
    assert _titles(filter_by_organism(corpus, [Organism.PLANT, "mouse"])) == [
        "Arabidopsis Seedling Growth",
        "Bone Loss in Mice",
        "Mouse and human muscle atrophy",
    ]


def test_filter_by_organism_overlapping_tags_counted_once(corpus):
    result = filter_by_organism(corpus, ["mouse", "human"])

    assert _titles(result) == [
        "Bone Loss in Mice",
        "Mouse and human muscle atrophy",
        "Immune Study",
    ]


def test_filter_by_organism_empty_list_returns_input(corpus):
    assert filter_by_organism(corpus, []) == corpus


def test_filter_by_unknown_organism_yields_nothing(corpus):
    assert filter_by_organism(corpus, ["unicorn"]) == []
    assert filter_by_organism(corpus, ["other"]) == []


def test_year_range_single_year_boundary(corpus, execution_log):
    result = filter_by_year_range(corpus, 2000, 2000)

    assert _titles(result) == ["Mouse and human muscle atrophy"]
    execution_log.record("Year filter", "[2000, 2000] keeps only the 2000 record")


def test_year_range_always_excludes_unknown_years(corpus):
    result = filter_by_year_range(corpus, -10_000, 10_000)

    assert len(result) == 4
    assert all(r.year is not None for r in result)


def test_available_year_range(corpus):
    assert available_year_range(corpus) == (2000, 2015)
    assert available_year_range([Publication(title="No year")]) == (0, 0)


# --------------------------
# KPIs and statistics
# --------------------------


def test_kpis_for_corpus(corpus):
    assert get_kpis(corpus) == Kpis(
        total=5,
        year_min=2000,
        year_max=2015,
        organisms_count=3,
        median_year=2010,
    )


def test_median_uses_element_at_half_length(execution_log):
    records = [Publication(title=f"Paper {y}", year=y) for y in (2015, 2000, 2010, 2005)]

    assert get_kpis(records).median_year == 2010
    execution_log.record("Median year", "Years [2000, 2005, 2010, 2015] -> element at index 2 = 2010")


def test_kpis_for_empty_or_yearless_collections():
    assert get_kpis([]) == Kpis(total=0, year_min=0, year_max=0, organisms_count=0, median_year=0)

    kpis = get_kpis([Publication(title="Mystery")])
    assert kpis.total == 1
    assert (kpis.year_min, kpis.year_max, kpis.median_year) == (0, 0, 0)


def test_organism_stats_do_not_correct_for_overlap(corpus):
    stats = get_organism_stats(corpus)

    assert stats == OrganismStats(mouse=2, human=2, plant=1, drosophila=0, microbe=0, other=0)
    # One record is untagged, but the mouse+human record is counted twice.
    assert sum(stats.as_dict().values()) == len(corpus)


def test_organism_stats_other_can_go_negative():
    stats = get_organism_stats([Publication(title="Mouse, human and plant tissue")])

    assert stats.other == 1 - 3


def test_organism_stats_other_counts_untagged_without_overlap():
    records = [
        Publication(title="Mouse bone"),
        Publication(title="Radiation dosimetry"),
        Publication(title="Cabin acoustics"),
    ]

    assert get_organism_stats(records).other == 2


def test_organism_options_only_lists_matched_organisms(corpus):
    assert organism_options(corpus) == {
        Organism.MOUSE: 2,
        Organism.HUMAN: 2,
        Organism.PLANT: 1,
    }


def test_papers_per_year_sorted_ascending(corpus):
    assert get_papers_per_year(corpus) == [
        YearCount(2000, 1),
        YearCount(2005, 1),
        YearCount(2010, 1),
        YearCount(2015, 1),
    ]


def test_papers_per_year_by_organism_includes_other_series(corpus):
    records = corpus + [Publication(title="Cabin acoustics", year=2010)]

    series = get_papers_per_year_by_organism(records)

    assert list(series) == ["mouse", "human", "plant", "drosophila", "microbe", "other"]
    assert [yc.count for yc in series["mouse"]] == [1, 0, 1, 0]
    assert [yc.count for yc in series["human"]] == [1, 0, 0, 1]
    assert [yc.count for yc in series["plant"]] == [0, 1, 0, 0]
    assert [yc.count for yc in series["drosophila"]] == [0, 0, 0, 0]
    assert [yc.year for yc in series["other"]] == [2000, 2005, 2010, 2015]
    assert [yc.count for yc in series["other"]] == [0, 0, 1, 0]


def test_precomputed_index_gives_same_answers(corpus):
    index = build_index(corpus)

    assert search_papers(corpus, "mice", index=index) == search_papers(corpus, "mice")
    assert get_kpis(corpus, index=index) == get_kpis(corpus)


# --------------------------
# Relevance
# --------------------------


def test_relevance_title_hit_outranks_summary_hit(execution_log):
    in_title = Publication(title="Microgravity and bone", summary="")
    in_summary = Publication(title="Bone study", summary="Effects of microgravity")
    absent = Publication(title="Cabin acoustics", summary="Noise levels")

    assert calculate_relevance_score(in_title, ["microgravity"]) == 4
    assert calculate_relevance_score(in_summary, ["microgravity"]) == 1
    assert calculate_relevance_score(absent, ["microgravity"]) == 0

    top = get_top_papers_by_relevance([absent, in_summary, in_title], ["microgravity"])
    assert top == [in_title, in_summary]
    execution_log.record("Relevance", "Title hit scores 4, summary hit 1, no hit excluded")


def test_relevance_is_case_insensitive_and_sums_keywords():
    record = Publication(title="Mouse Bone Density", summary="spaceflight")

    assert calculate_relevance_score(record, ["BONE", "spaceflight", "lunar"]) == 4 + 1


def test_top_papers_ties_keep_input_order_and_respect_limit():
    records = [Publication(title=f"Paper {i}", summary="radiation") for i in range(5)]

    top = get_top_papers_by_relevance(records, ["radiation"], limit=3)

    assert _titles(top) == ["Paper 0", "Paper 1", "Paper 2"]


# --------------------------
# Pagination
# --------------------------


def test_paginate_slices_and_clamps():
    records = [Publication(title=f"Paper {i}") for i in range(45)]

    last = paginate(records, page=3, page_size=20)
    assert last.total_pages == 3
    assert len(last.items) == 5
    assert (last.start, last.end) == (41, 45)

    assert paginate(records, page=99, page_size=20).page == 3
    assert paginate(records, page=0, page_size=20).page == 1


def test_paginate_empty_collection():
    page = paginate([], page=2)

    assert page.items == []
    assert page.page == 1
    assert page.total_pages == 0
    assert page.start == 0


def test_paginate_rejects_non_positive_page_size():
    with pytest.raises(ValueError):
        paginate([], page_size=0)


# --------------------------
# Insights
# --------------------------


def test_research_area_coverage_over_dated_records(corpus, execution_log):
    coverage = get_research_area_coverage(corpus)

    assert [area.name for area in coverage] == [
        "Bone/Skeletal",
        "Cardiovascular",
        "Immune",
        "Neuro/CNS",
        "Microbiome/Host-Microbe",
    ]
    # Four dated records: one mentions bone, one mentions immune.
    assert [area.percent for area in coverage] == pytest.approx([25.0, 0.0, 25.0, 0.0, 0.0])
    execution_log.record("Research coverage", "Bone and immune areas each cover 1 of 4 dated papers")


def test_research_area_coverage_ignores_records_without_year():
    records = [
        Publication(title="Heart rate in orbit", year=2012),
        Publication(title="Cardiac remodeling", year=None),
        Publication(title="Gut bacteria shifts", year=2013),
    ]

    coverage = get_research_area_coverage(records, [("Cardio", ["heart", "cardiac"]), ("Gut", ["gut"])])

    assert coverage == [AreaCoverage("Cardio", 50.0), AreaCoverage("Gut", 50.0)]


def test_research_area_coverage_empty_collection():
    assert all(area.percent == 0.0 for area in get_research_area_coverage([]))


def test_dataset_summary_for_corpus(corpus, execution_log):
    summary = get_dataset_summary(corpus)

    assert (summary.total, summary.year_min, summary.year_max, summary.year_span) == (5, 2000, 2015, 15)
    assert summary.average_per_year == pytest.approx(5 / 15)
    # Mouse and human tie at 2; the first in organism order wins.
    assert (summary.top_organism, summary.top_organism_count) == ("mouse", 2)
    # Years 2010 and 2015 fall inside the last five years before 2015.
    assert summary.recent_count == 2
    assert summary.recent_percent == pytest.approx(40.0)
    assert summary.activity == "strong"
    execution_log.record("Dataset summary", "5 papers over 15 years, mouse on top, 40% recent")


def test_dataset_summary_single_year_counts_other_as_top():
    records = [
        Publication(title="Cabin acoustics", year=2020),
        Publication(title="Cabin lighting", year=2020),
    ]

    summary = get_dataset_summary(records)

    assert summary.year_span == 0
    assert summary.average_per_year == 2.0
    assert (summary.top_organism, summary.top_organism_count) == ("other", 2)


def test_dataset_summary_moderate_activity():
    records = [Publication(title=f"Paper {y}", year=y) for y in (1990, 1995, 2000, 2020)]

    summary = get_dataset_summary(records)

    assert summary.recent_count == 1
    assert summary.activity == "moderate"


def test_dataset_summary_empty_collection():
    summary = get_dataset_summary([])

    assert summary.total == 0
    assert summary.average_per_year == 0.0
    assert summary.top_organism is None
    assert summary.recent_percent == 0.0
    assert summary.activity == "moderate"


def test_get_paper_at_uses_list_position(corpus):
    assert get_paper_at(corpus, 0).title == "Bone Loss in Mice"
    assert get_paper_at(corpus, 4).title == "Radiation shielding materials"


@pytest.mark.parametrize("position", [-1, 5, 100])
def test_get_paper_at_out_of_range_raises(corpus, position):
    with pytest.raises(PaperNotFound):
        get_paper_at(corpus, position)



# --------------------------
# End to end
# --------------------------


def test_load_then_query_end_to_end(execution_log):
    records = load_publications(
        [
            {"title": "Bone Loss in Mice", "summary": "microgravity effects", "year": 2010},
            {"title": "Immune Study", "summary": "human patients", "year": 2015},
            {"title": "Bone Loss in Mice", "summary": "duplicate", "year": 2010},
        ]
    )

    assert len(records) == 2
    kpis = get_kpis(records)
    assert (kpis.total, kpis.year_min, kpis.year_max) == (2, 2010, 2015)
    assert filter_by_organism(records, ["mouse"]) == [records[0]]
    execution_log.record("End to end", "3 raw records -> 2 loaded, mouse filter returns the bone-loss paper")
