"""Command-line entry point for validating and compiling experiences."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable

from .compiler import compile_summary
from .errors import ExperienceLoadError, ExperienceValidationError
from .loader import load_experience, read_json_mapping
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="experience-engine",
        description="Validate experience documents and compile their results into Markdown",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for structured logs written to stderr",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser("validate", help="Check an experience file")
    validate.add_argument("experience", help="Path to the experience JSON file")

    compile_ = commands.add_parser("compile", help="Compile results into a Markdown summary")
    compile_.add_argument("experience", help="Path to the experience JSON file")
    compile_.add_argument("--results", help="JSON object of results keyed by section id")
    compile_.add_argument("--comments", help="JSON object of reviewer comments keyed by section id")
    compile_.add_argument("--out", help="Write the summary here instead of stdout")
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    setup_logging(use_cloud_logging=False, level=getattr(logging, args.log_level))

    try:
        experience = load_experience(Path(args.experience))
        if args.command == "validate":
            print(f"OK: {experience.title} ({len(experience.sections)} sections)")
            return 0

        results = read_json_mapping(Path(args.results)) if args.results else {}
        comments = read_json_mapping(Path(args.comments)) if args.comments else None
    except ExperienceValidationError as exc:
        print(f"\n❌ Validation Failed for {exc.source}:", file=sys.stderr)
        for issue in exc.issues:
            print(f"  - {issue.describe()}", file=sys.stderr)
        return 1
    except ExperienceLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    markdown = compile_summary(experience, results, comments)
    if args.out:
        Path(args.out).write_text(markdown, encoding="utf-8")
        logger.info(f"Wrote summary to {args.out}")
    else:
        print(markdown)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
