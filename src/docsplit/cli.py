"""
Command-line front end.

Usage:
    docsplit split --source inbox/batch.pdf --analysis result.json --root ./data
    docsplit annotate --mode field --source inbox/batch.pdf --analysis result.json
    docsplit classify --store azure --source inbox/batch.pdf --analysis result.json

``--analysis`` is a JSON file holding an analysis result (``documents`` and
``pages``), optionally wrapped in ``analyzeResult``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from docsplit.core.config import get_settings
from docsplit.core.document import AnalyzeResult
from docsplit.core.errors import DocsplitError
from docsplit.service import DocumentAssemblyService, build_store


def load_analysis(path: Path) -> AnalyzeResult:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if "analyzeResult" in payload:
        payload = payload["analyzeResult"]
    return AnalyzeResult.model_validate(payload)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="docsplit",
        description="Split a PDF by document type and burn analysis regions onto it.",
    )
    p.add_argument("command", choices=["split", "annotate", "classify"])
    p.add_argument("--source", required=True, help="Source PDF locator in the store.")
    p.add_argument("--analysis", required=True, type=Path, help="Analysis result JSON file.")
    p.add_argument(
        "--mode",
        choices=["document", "field"],
        default="document",
        help="Annotation level for the annotate command.",
    )
    p.add_argument("--store", default=None, help="Storage backend (local, http, azure).")
    p.add_argument("--root", type=Path, default=None, help="Root directory for the local store.")
    p.add_argument("--base-url", default=None, help="Base URL for the http store.")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store_name = args.store or settings.storage_backend
    store_kwargs: dict = {}
    if store_name == "local" and args.root is not None:
        store_kwargs["root"] = args.root
    if store_name == "http" and args.base_url:
        store_kwargs["base_url"] = args.base_url

    try:
        analysis = load_analysis(args.analysis)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"Error: could not read analysis {args.analysis}: {e}", file=sys.stderr)
        return 1

    try:
        service = DocumentAssemblyService(build_store(store_name, settings, **store_kwargs), settings)
        if args.command == "split":
            splits = service.split_by_type(args.source, analysis)
            output = [s.model_dump(by_alias=True) for s in splits]
        elif args.command == "annotate":
            output = service.annotate(args.source, analysis, args.mode).manifest()
        else:
            outcome = service.process_classification(args.source, analysis)
            output = outcome.model_dump(by_alias=True, exclude_none=True)
    except DocsplitError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
