#!/usr/bin/env python3
"""Command-line interface: nebula-mapper <mapping.yaml> <input.json> [options]

Prints one statement per line to stdout (or --output). On any error a single
diagnostic line goes to stderr, nothing is printed, and the exit code is 1.
"""

import argparse
import logging
import sys
from pathlib import Path

from .core.config import generator_config
from .core.errors import MapperError
from .core.logging import setup_logging
from .services.mapping_loader import load_json_file, load_mapping_file
from .services.pipeline import MappingPipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nebula-mapper",
        description="Generate Nebula Graph nGQL statements from a JSON document and a YAML mapping",
    )
    parser.add_argument("mapping", help="Path to mapping.yaml")
    parser.add_argument("input", help="Path to the input JSON document")
    parser.add_argument("--schema-only", action="store_true", help="Only generate schema statements")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help=f"Batch size for INSERT statements (default: {generator_config.BATCH_SIZE})",
    )
    parser.add_argument("--with-indexes", action="store_true", help="Append CREATE ... INDEX statements")
    parser.add_argument("--drop-schema", action="store_true", help="Prepend DROP statements for the mapped schema")
    parser.add_argument("--output", "-o", help="Write statements to this file instead of stdout")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits 2 on usage errors; --help exits 0
        return 0 if e.code in (0, None) else 1

    setup_logging(generator_config.resolve_log_level("WARNING"), stream="ext://sys.stderr")

    try:
        mapping = load_mapping_file(args.mapping)
        document = load_json_file(args.input)

        pipeline = MappingPipeline(config=generator_config)
        result = pipeline.generate(
            mapping,
            document,
            schema_only=args.schema_only,
            batch_size=args.batch_size,
            include_indexes=args.with_indexes or None,
            drop_schema=args.drop_schema,
        )
    except MapperError as e:
        print(e.describe(), file=sys.stderr)  # noqa: T201
        return 1

    text = result.to_text()
    if args.output:
        try:
            Path(args.output).write_text(text + "\n" if text else "", encoding="utf-8")
        except OSError as e:
            print(f"Error: Cannot write output file: {e}", file=sys.stderr)  # noqa: T201
            return 1
        logger.info(f"Wrote {len(result.statements)} statements to {args.output}")
    elif text:
        print(text)  # noqa: T201

    return 0


if __name__ == "__main__":
    sys.exit(main())
