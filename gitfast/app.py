import argparse
from pathlib import Path

from .env import Settings, load_env

from . import __version__
from .export import write_outputs
from .github import GitHubClient
from .logger import get_logger
from .pipeline import ScrapeOptions, run_scrape
from .schema import InvalidScrapeRequest
from .search import DEFAULT_LOCATIONS


def _locations(raw: str | None) -> list[str]:
    if not raw:
        return list(DEFAULT_LOCATIONS)
    return [loc.strip() for loc in raw.split(",") if loc.strip()]


def cmd_query(args: argparse.Namespace) -> None:
    options = ScrapeOptions(
        locations=_locations(args.locations),
        min_repos=args.min_repos,
        min_followers=args.min_followers,
    ).clamped()
    print("GitHub user search queries:")
    for q in options.queries():
        print(f" - {q}")


def cmd_scrape(args: argparse.Namespace) -> None:
    settings = Settings.from_env()
    logger = get_logger()
    logger.set_level(settings.log_level)

    options = ScrapeOptions(
        locations=_locations(args.locations),
        min_repos=args.min_repos,
        min_followers=args.min_followers,
        max_pages_per_query=args.max_pages if args.max_pages is not None else settings.max_pages,
        per_page=args.per_page,
        concurrency=args.concurrency if args.concurrency is not None else settings.concurrency,
        min_score=args.min_score if args.min_score is not None else settings.min_score,
    )
    output_dir = Path(args.output_dir) if args.output_dir else settings.output_dir

    try:
        with GitHubClient(token=settings.github_token) as client:
            result = run_scrape(options, client=client)
    except InvalidScrapeRequest as e:
        raise SystemExit(f"Invalid options: {e}")

    json_path, csv_path = write_outputs(result.users, output_dir)
    stats = result.stats()
    print(
        f"Done. candidates={stats['totalCandidates']} unique={stats['uniqueUsers']} "
        f"kept={stats['keptAfterFilter']}"
    )
    print(f"JSON saved -> {json_path}")
    print(f"CSV saved -> {csv_path}")
    logger.log_metrics_summary()


def main():
    # Load .env if present (GITHUB_TOKEN, OUTPUT_DIR, etc.)
    load_env()
    parser = argparse.ArgumentParser(prog="gitfast", description="Find GitHub users located in Uganda")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")

    qry = subparsers.add_parser("query", help="Print the GitHub search queries a scrape would run")
    qry.add_argument("--locations", help="Comma-separated locations (default: Uganda and major cities)")
    qry.add_argument("--min-repos", type=int, default=0, help="Only users with more than N public repos")
    qry.add_argument("--min-followers", type=int, default=0, help="Only users with more than N followers")
    qry.set_defaults(func=cmd_query)

    scr = subparsers.add_parser("scrape", help="Search, resolve and score users; write JSON and CSV")
    scr.add_argument("--locations", help="Comma-separated locations (default: Uganda and major cities)")
    scr.add_argument("--min-repos", type=int, default=0, help="Only users with more than N public repos")
    scr.add_argument("--min-followers", type=int, default=0, help="Only users with more than N followers")
    scr.add_argument("--max-pages", type=int, help="Pages per query, max 10 (default: MAX_PAGES or 10)")
    scr.add_argument("--per-page", type=int, default=100, help="Results per page, max 100")
    scr.add_argument("--concurrency", type=int, help="Parallel profile requests, max 10 (default: CONCURRENCY or 5)")
    scr.add_argument("--min-score", type=int, help="Minimum confidence score to keep (default: MIN_SCORE or 50)")
    scr.add_argument("--output-dir", help="Directory for uganda_users.json/.csv (default: OUTPUT_DIR or .)")
    scr.set_defaults(func=cmd_scrape)

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
