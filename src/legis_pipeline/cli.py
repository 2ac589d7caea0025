"""Command-line interface for orchestrating the pipeline.

Provides subcommands: `filter`, `run`, `publish`, and `all`. Each command
is implemented as a `cmd_*` function that accepts an argparse namespace.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from legis_pipeline.config import Settings, get_settings
from legis_pipeline.logging_config import configure_logging

# LOAD + FILTER
from legis_pipeline.ingest.load_raw import load_documents, read_listing
from legis_pipeline.clean.transform import filter_titles

# RUN
from legis_pipeline.pipeline import exclusions_for, run_pipeline
from legis_pipeline.aggregate.export import TABLES, read_table, write_tables

# PUBLISH
from legis_pipeline.aggregate.load_gold import publish_table
from legis_pipeline.db import get_client, get_db

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _listing_paths(args: argparse.Namespace, s: Settings) -> tuple[Path, Path]:
    """Return the law and decree listing paths, defaulting to the data dir."""
    laws = Path(args.laws) if args.laws else s.data_dir / "laws.csv"
    decrees = Path(args.decrees) if args.decrees else s.data_dir / "decrees.csv"
    return laws, decrees


def _output_dir(args: argparse.Namespace, s: Settings) -> Path:
    return Path(args.out) if getattr(args, "out", None) else s.output_dir


# --------------------------------------------------
# FILTER
# --------------------------------------------------
def cmd_filter(args: argparse.Namespace) -> None:
    """Load both listings and report how many records each pattern drops.

    Args:
        args: argparse namespace with `laws`, `decrees`.
    """
    s = get_settings()
    exclusions = exclusions_for(s)
    laws_path, decrees_path = _listing_paths(args, s)

    records = load_documents(read_listing(laws_path), read_listing(decrees_path))
    result = filter_titles(records, exclusions)

    for pattern, dropped in result.dropped_by_pattern.items():
        log.info("  %-30s %d", pattern, dropped)
    log.info("Dropped %d of %d records.", result.dropped, len(records))


# --------------------------------------------------
# RUN
# --------------------------------------------------
def cmd_run(args: argparse.Namespace) -> None:
    """Run the full pipeline and write the result tables as CSV.

    Args:
        args: argparse namespace with `laws`, `decrees`, `out`.
    """
    s = get_settings()
    exclusions = exclusions_for(s)
    laws_path, decrees_path = _listing_paths(args, s)

    result = run_pipeline(
        read_listing(laws_path),
        read_listing(decrees_path),
        s,
        exclusions=exclusions,
    )
    write_tables(result, _output_dir(args, s))
    log.info("Run completed.")


# --------------------------------------------------
# PUBLISH
# --------------------------------------------------
def cmd_publish(args: argparse.Namespace) -> None:
    """Upsert the CSV result tables into MongoDB.

    Raises:
        RuntimeError: if `MONGO_URI` is not configured.
    """
    s = get_settings()
    if not s.mongo_uri:
        raise RuntimeError("MONGO_URI is required to publish. Set it in .env.")

    out_dir = _output_dir(args, s)
    client = get_client(s.mongo_uri)
    db = get_db(client, s.mongo_db)
    try:
        for name in TABLES:
            publish_table(read_table(name, out_dir), name, db)
    finally:
        client.close()

    log.info("Publish completed.")


# --------------------------------------------------
# ALL
# --------------------------------------------------
def cmd_all(args: argparse.Namespace) -> None:
    """Convenience: run → publish with the provided args."""
    cmd_run(args)
    cmd_publish(args)


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    The returned parser has subcommands `filter`, `run`, `publish`, and
    `all`.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="legis_pipeline")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_filter = sub.add_parser("filter")
    p_filter.add_argument("--laws", default=None)
    p_filter.add_argument("--decrees", default=None)

    p_run = sub.add_parser("run")
    p_run.add_argument("--laws", default=None)
    p_run.add_argument("--decrees", default=None)
    p_run.add_argument("--out", default=None)

    p_publish = sub.add_parser("publish")
    p_publish.add_argument("--out", default=None)

    p_all = sub.add_parser("all")
    p_all.add_argument("--laws", default=None)
    p_all.add_argument("--decrees", default=None)
    p_all.add_argument("--out", default=None)

    return p


def main() -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    configure_logging(Path("logs/pipeline.log"))

    args = build_parser().parse_args()

    if args.cmd == "filter":
        cmd_filter(args)
    elif args.cmd == "run":
        cmd_run(args)
    elif args.cmd == "publish":
        cmd_publish(args)
    elif args.cmd == "all":
        cmd_all(args)
    else:
        raise SystemExit(2)


if __name__ == "__main__":
    main()
