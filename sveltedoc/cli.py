"""Command-line interface writing the documentation of one component as JSON."""

import argparse
import json
import logging
import sys
from pathlib import Path

from sveltedoc.errors import ExtractionError
from sveltedoc.extract import ComponentExtractor
from sveltedoc.load_config import load_config
from sveltedoc.options import ExtractOptions

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser of the ``sveltedoc`` command."""
    ap = argparse.ArgumentParser(
        prog="sveltedoc",
        description="Extract documentation from a Svelte component as JSON.",
    )
    ap.add_argument("file", type=Path, help="Svelte component file to document")
    ap.add_argument("--config", help="Path to a YAML configuration file")
    ap.add_argument(
        "--dialect",
        type=int,
        choices=ExtractOptions.SUPPORTED_DIALECTS,
        help="Svelte dialect version (default: from config, else 3)",
    )
    ap.add_argument(
        "--include-locations",
        action="store_true",
        default=None,
        help="Add source offsets (loc) to every item",
    )
    ap.add_argument(
        "--ignore-private",
        action="store_true",
        default=None,
        help="Leave private and protected items out of the output",
    )
    ap.add_argument("--out", type=Path, help="Write JSON here instead of stdout")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return ap


def run(args: argparse.Namespace) -> int:
    """Execute one extraction for parsed arguments."""
    config = load_config(args.config)
    if not args.file.exists():
        msg = f"No such file: {args.file}"
        raise SystemExit(msg)

    options = ExtractOptions.from_config(
        config,
        dialect_version=args.dialect,
        include_source_locations=args.include_locations,
        ignore_private=args.ignore_private,
        file_name=args.file.name,
    )
    extractor = ComponentExtractor(options)
    source = args.file.read_text(encoding="utf-8")
    try:
        doc = extractor.extract(source)
    except ExtractionError as exc:
        logger.error("Extraction of %s failed: %s", args.file, exc.message)
        print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        return 1

    for warning in extractor.warnings:
        logger.warning("%s", warning)
    output = json.dumps(doc.to_dict(), indent=config["output"]["indent"])
    if args.out:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(output + "\n", encoding="utf-8")
        logger.info("Wrote documentation of %s to %s", args.file, args.out)
    else:
        print(output)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the command line interface."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
