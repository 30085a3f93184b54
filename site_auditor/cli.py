# site_auditor/cli.py
# Defines the command-line interface using argparse.

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Sequence

from site_auditor import __version__
from site_auditor.api import audit, audit_site
from site_auditor.config import categories_from_config, load_config
from site_auditor.errors import AuditError
from site_auditor.observer import LoggingObserver
from site_auditor.rules import build_default_registry
from site_auditor.ui import (
    render_audit_header,
    render_category_section,
    render_category_table,
    render_errors_section,
    render_score_line,
)

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BELOW_THRESHOLD = 1
EXIT_ERROR = 2


def _configure_logging(verbose: bool) -> None:
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _json_default(o: Any) -> Any:
    # Minimal, safe encoder for dataclasses and datetimes.
    if isinstance(o, datetime):
        return o.isoformat()
    if is_dataclass(o):
        return asdict(o)  # type: ignore[arg-type]
    return str(o)


def _write_json(result: Any, target: str, stdout: IO[str]) -> None:
    if target == "-":
        json.dump(result, stdout, default=_json_default, indent=2)
        stdout.write("\n")
        return
    out_path = Path(target)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(result, f, default=_json_default, indent=2)
    print(f"Full audit report written to {target}", file=stdout)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Audit a web page or site against weighted SEO rule categories.",
        prog="site_auditor",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging output to stderr and list passing rules.",
    )
    parser.add_argument(
        "--config",
        metavar="PYPROJECT",
        default=None,
        help="pyproject.toml to read [tool.site_auditor] from (default: ./pyproject.toml).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- audit ---
    audit_parser = subparsers.add_parser("audit", help="Audit a URL and print a report.")
    audit_parser.add_argument("url", help="The URL to audit (the seed URL when crawling).")
    audit_parser.add_argument(
        "-c",
        "--category",
        dest="categories",
        action="append",
        metavar="ID",
        help="Only run this category. Repeat for several. (Default: all)",
    )
    audit_parser.add_argument(
        "--json",
        dest="json_output",
        metavar="FILEPATH",
        help="Write the full result as JSON to FILEPATH ('-' for stdout).",
    )
    audit_parser.add_argument(
        "--timeout", type=float, metavar="SECONDS", help="Per-request timeout."
    )

    crawl_group = audit_parser.add_argument_group("crawl arguments")
    crawl_group.add_argument(
        "--crawl", action="store_true", help="Crawl the site and audit every page found."
    )
    crawl_group.add_argument(
        "--max-pages", type=int, metavar="N", help="Maximum pages to crawl."
    )
    crawl_group.add_argument(
        "--concurrency", type=int, metavar="N", help="Concurrent requests while crawling."
    )
    crawl_group.add_argument(
        "--crawl-timeout", type=float, metavar="SECONDS", help="Stop dispatching after this long."
    )

    # --- categories / rules ---
    subparsers.add_parser("categories", help="List categories, weights and rule counts.")
    rules_parser = subparsers.add_parser("rules", help="List registered rules.")
    rules_parser.add_argument(
        "-c", "--category", dest="category", metavar="ID", help="Only this category."
    )
    return parser


def _list_categories(pyproject: Path | None, stdout: IO[str]) -> int:
    config = load_config(pyproject)
    registry = build_default_registry()
    counts = {cat: len(registry.rules_by_category(cat)) for cat in registry.categories()}
    render_category_table(categories_from_config(config), counts, file=stdout)
    return EXIT_OK


def _list_rules(category: str | None, stdout: IO[str]) -> int:
    registry = build_default_registry()
    for rule in registry.all_rules():
        if category and rule.category != category:
            continue
        print(f"{rule.id:<28} {rule.category:<10} w={rule.weight}  {rule.name}", file=stdout)
    return EXIT_OK


async def async_main(
    argv: Sequence[str] | None = None, stdout: IO[str] | None = None
) -> int:
    """Async entry point for the command-line interface."""
    stdout = stdout or sys.stdout
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    pyproject = Path(args.config) if args.config else None

    try:
        if args.command == "categories":
            return _list_categories(pyproject, stdout)
        if args.command == "rules":
            return _list_rules(args.category, stdout)

        # args.command == "audit"
        observer = LoggingObserver() if args.verbose else None
        quiet = args.json_output == "-"
        if not quiet:
            render_audit_header(args.url, args.crawl, file=stdout)

        if args.crawl:
            result = await audit_site(
                args.url,
                max_pages=args.max_pages,
                concurrency=args.concurrency,
                categories=args.categories,
                timeout=args.timeout,
                crawl_timeout=args.crawl_timeout,
                observer=observer,
                pyproject_path=pyproject,
            )
        else:
            result = await audit(
                args.url,
                categories=args.categories,
                timeout=args.timeout,
                observer=observer,
                pyproject_path=pyproject,
            )

        config = load_config(pyproject)
    except AuditError as e:
        log.debug("Audit failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if not quiet:
        names = {cat.id: cat.name for cat in categories_from_config(config)}
        render_score_line(result, file=stdout)
        render_category_section(
            result.category_results, names, verbose=args.verbose, file=stdout
        )
        render_errors_section(result.errors, file=stdout)
    if args.json_output:
        _write_json(result, args.json_output, stdout)

    if result.overall_score >= int(config.get("pass_threshold", 70)):
        return EXIT_OK
    return EXIT_BELOW_THRESHOLD


def main(argv: Sequence[str] | None = None) -> int:
    """Synchronous wrapper for the CLI entry point."""
    return asyncio.run(async_main(argv))


if __name__ == "__main__":
    sys.exit(main())
