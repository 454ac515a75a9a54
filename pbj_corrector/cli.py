"""
Command line entry point: process a PBJ CSV file from disk.

    pbj-corrector staffing.csv --out-dir out/
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .engine import process_text, render_artifacts
from .parse import UnreadableInputError, decode_input
from .report import corrected_filename, report_filename
from .settings import get_settings

logger = logging.getLogger("pbj_corrector")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pbj-corrector",
        description="Validate and auto-correct a PBJ staffing CSV file.",
    )
    parser.add_argument("input", type=Path, help="PBJ CSV file")
    parser.add_argument("--out-dir", type=Path, default=None,
                        help="where to write the artifacts (default: next to the input)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    level = (args.log_level or settings.log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO),
                        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    try:
        text, _ = decode_input(args.input.read_bytes())
    except (OSError, UnreadableInputError) as exc:
        logger.error("cannot read %s: %s", args.input, exc)
        return 2

    generated_at = datetime.now()
    result = process_text(text, source=args.input.name)
    artifacts = render_artifacts(result, generated_at)

    out_dir = args.out_dir or args.input.parent
    out_dir.mkdir(parents=True, exist_ok=True)
    corrected_path = out_dir / corrected_filename(args.input.name)
    report_path = out_dir / report_filename(generated_at)
    corrected_path.write_text(artifacts["corrected_csv"], encoding="utf-8")
    report_path.write_text(artifacts["issue_report"], encoding="utf-8")

    s = result.summary
    print(f"Total Records: {s.total_records}")
    print(f"Valid Records: {s.valid_records}")
    print(f"Records with Errors: {s.error_records}")
    print(f"Records with Warnings: {s.warning_records}")
    print(f"Corrected: {corrected_path}")
    print(f"Report: {report_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
