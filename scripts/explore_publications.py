"""Search, filter and summarize the bioscience publication corpus from the command line."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.config import get_settings
from src.indexing import Organism, PaperNotFound, PublicationExplorer
from src.ingestion import LoadError, load_publications_from_source
from src.utils.log_setup import configure_logging

logger = logging.getLogger(__name__)

VIEWS = ("papers", "kpis", "organisms", "trends", "top", "insights", "paper")


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--source",
        default=settings.publications_source,
        help=f"Path or URL of the publications JSON array (default: {settings.publications_source}).",
    )
    parser.add_argument(
        "--view",
        choices=VIEWS,
        default="papers",
        help="What to print: a page of papers, KPIs, organism stats, yearly trends, top papers, insights or one paper.",
    )
    parser.add_argument("--query", "-q", default="", help="Keyword search terms.")
    parser.add_argument(
        "--organism",
        "-o",
        action="append",
        choices=[o.value for o in Organism],
        default=[],
        help="Organism tag to filter on (repeatable).",
    )
    parser.add_argument("--min-year", type=int, help="Lower publication year bound (inclusive).")
    parser.add_argument("--max-year", type=int, help="Upper publication year bound (inclusive).")
    parser.add_argument("--page", type=int, default=1, help="1-based results page (default: 1).")
    parser.add_argument(
        "--page-size",
        type=int,
        default=settings.page_size,
        help=f"Results per page (default: {settings.page_size}).",
    )
    parser.add_argument(
        "--keyword",
        "-k",
        action="append",
        default=[],
        help="Relevance keyword for --view top (repeatable).",
    )
    parser.add_argument("--limit", type=int, default=10, help="Number of top papers (default: 10).")
    parser.add_argument("--position", type=int, default=0, help="0-based list position for --view paper.")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level.")
    return parser.parse_args()


def _render(explorer: PublicationExplorer, args: argparse.Namespace) -> Dict[str, Any]:
    if args.view == "kpis":
        kpis = explorer.kpis()
        return {
            "total": kpis.total,
            "year_min": kpis.year_min,
            "year_max": kpis.year_max,
            "organisms_count": kpis.organisms_count,
            "median_year": kpis.median_year,
        }

    if args.view == "organisms":
        return explorer.organism_stats().as_dict()

    if args.view == "trends":
        return {
            "total": [{"year": yc.year, "count": yc.count} for yc in explorer.papers_per_year()],
            "by_organism": {
                label: [{"year": yc.year, "count": yc.count} for yc in series]
                for label, series in explorer.papers_per_year_by_organism().items()
            },
        }

    if args.view == "insights":
        summary = explorer.dataset_summary()
        return {
            "summary": {
                "total": summary.total,
                "year_min": summary.year_min,
                "year_max": summary.year_max,
                "year_span": summary.year_span,
                "average_per_year": round(summary.average_per_year, 1),
                "top_organism": summary.top_organism,
                "top_organism_count": summary.top_organism_count,
                "recent_count": summary.recent_count,
                "recent_percent": round(summary.recent_percent, 1),
                "activity": summary.activity,
            },
            "coverage": [
                {"area": area.name, "percent": round(area.percent, 1)} for area in explorer.research_area_coverage()
            ],
        }

    if args.view == "paper":
        try:
            return explorer.paper_at(args.position).to_dict()
        except PaperNotFound as exc:
            raise SystemExit(str(exc)) from exc

    if args.view == "top":
        if not args.keyword:
            raise SystemExit("--view top requires at least one --keyword")
        top = explorer.top_by_relevance(args.keyword, limit=args.limit)
        return {"keywords": args.keyword, "papers": [p.to_dict() for p in top]}

    page = explorer.explore(
        query=args.query,
        organisms=args.organism,
        min_year=args.min_year,
        max_year=args.max_year,
        page=args.page,
        page_size=args.page_size,
    )
    return {
        "page": page.page,
        "page_size": page.page_size,
        "total": page.total,
        "total_pages": page.total_pages,
        "papers": [p.to_dict() for p in page.items],
    }


def main() -> None:
    args = parse_args()
    configure_logging(args.log_level)
    if args.page_size < 1:
        raise SystemExit("--page-size must be at least 1")

    try:
        records = load_publications_from_source(args.source)
    except LoadError as exc:
        raise SystemExit(str(exc)) from exc

    explorer = PublicationExplorer(records, page_size=args.page_size)
    logger.debug("Rendering %s view over %d publications", args.view, len(explorer))
    print(json.dumps(_render(explorer, args), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
