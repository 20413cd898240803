"""
Module: cli

Purpose:
    Command line interface for building and managing CIA papers.

    cia-paper build PAYLOAD.json --out DIR [--no-parallel] [--institution NAME] [-v]
    cia-paper list --out DIR
    cia-paper purge --out DIR --hours N

Exit codes:
    0 success, 2 invalid payload, 1 build/render/storage failure.

Used By:
    - pyproject [project.scripts] cia-paper
    - run_builder.py (source checkout launcher)
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import timedelta
from pathlib import Path
from typing import Optional, Sequence

from cia_toolkit import __version__
from cia_toolkit.builder import BuildError, BuilderConfig, InstitutionConfig, build_paper
from cia_toolkit.builder.output import PaperRegistry, RegistryError
from cia_toolkit.core.schemas import ValidationError, validate_payload_file

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cia-paper",
        description="Build Continuous Internal Assessment papers (PDF + DOCX)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", parents=[common], help="Validate a payload and render the paper")
    build.add_argument("payload", type=Path, help="Path to the paper payload JSON")
    build.add_argument("--out", type=Path, required=True, help="Artifact root directory")
    build.add_argument("--no-parallel", action="store_true", help="Render PDF and DOCX one after the other")
    build.add_argument("--institution", type=str, default=None, help="Override the institution name")
    build.add_argument("--timeout", type=float, default=60.0, help="Render timeout in seconds")

    listing = sub.add_parser("list", parents=[common], help="List stored papers, newest first")
    listing.add_argument("--out", type=Path, required=True, help="Artifact root directory")

    purge = sub.add_parser("purge", parents=[common], help="Delete papers older than a retention window")
    purge.add_argument("--out", type=Path, required=True, help="Artifact root directory")
    purge.add_argument("--hours", type=float, required=True, help="Retention window in hours")

    return parser


def _cmd_build(args: argparse.Namespace) -> int:
    try:
        payload = validate_payload_file(args.payload)
    except OSError as e:
        logger.error(f"Cannot read payload {args.payload}: {e}")
        return EXIT_FAILURE

    institution = InstitutionConfig(name=args.institution) if args.institution else InstitutionConfig()
    config = BuilderConfig(
        output_dir=args.out,
        institution=institution,
        parallel_render=not args.no_parallel,
        render_timeout_s=args.timeout,
    )
    result = build_paper(payload, config)
    print(f"{result.paper_id}")
    print(f"  PDF:  {result.pdf_path}")
    print(f"  DOCX: {result.docx_path}")
    for warning in result.warnings:
        print(f"  warning: {warning}")
    return EXIT_OK


def _cmd_list(args: argparse.Namespace) -> int:
    papers = PaperRegistry(args.out).list_papers()
    if not papers:
        print("No papers stored")
        return EXIT_OK
    for record in papers:
        header = record.header
        print(f"{record.paper_id}  {header.course_code} – {header.course_title}  ({record.created_at:%Y-%m-%d %H:%M})")
    return EXIT_OK


def _cmd_purge(args: argparse.Namespace) -> int:
    if args.hours < 0:
        logger.error("--hours must be non-negative")
        return EXIT_INVALID
    removed = PaperRegistry(args.out).purge_expired(timedelta(hours=args.hours))
    print(f"Removed {len(removed)} paper(s)")
    for paper_id in removed:
        print(f"  {paper_id}")
    return EXIT_OK


COMMANDS = {
    "build": _cmd_build,
    "list": _cmd_list,
    "purge": _cmd_purge,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return COMMANDS[args.command](args)
    except ValidationError as e:
        logger.error(f"Invalid payload: {e}")
        for problem in e.errors:
            print(f"  {problem}", file=sys.stderr)
        return EXIT_INVALID
    except (BuildError, RegistryError) as e:
        logger.error(f"Build failed: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
