"""Command-line interface for the annotation engine."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from .checker import ingest_matches, issue_group
from .config import Config
from .merger import merge_matches
from .pipeline import AnnotationPipeline
from .rules import default_registry


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Annotate English texts with grammar roles and reconcile checker matches",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Annotate a JSONL file of {"text": ...} records
  python -m annotator.cli annotate --input data/units.jsonl --output output/units.json

  # Only senior-high conditionals, as CSV
  python -m annotator.cli annotate --input data/units.jsonl --stage SH \\
      --category Conditional --format csv --output output/units.csv

  # Merge raw checker output for a text
  python -m annotator.cli merge --text essay.txt --matches matches.json

  # Learning goals for a text
  python -m annotator.cli goals --input essay.txt --top 6
        """,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # annotate
    p_annotate = sub.add_parser("annotate", help="Annotate a JSONL file of texts")
    p_annotate.add_argument("--config", type=Path, help="Path to YAML configuration file")
    p_annotate.add_argument("--input", type=Path, help="Path to input JSONL file")
    p_annotate.add_argument("--output", type=Path, help="Path to output file")
    p_annotate.add_argument("--format", choices=["json", "csv"], help="Output format")
    p_annotate.add_argument(
        "--engine",
        choices=["abbrev", "lookbehind"],
        help="Sentence splitting engine (default: abbrev)",
    )
    p_annotate.add_argument(
        "--stage",
        action="append",
        choices=["JH", "SH"],
        help="School stage to include (repeatable; default: both)",
    )
    p_annotate.add_argument(
        "--category",
        action="append",
        help="Rule category to include (repeatable; default: all)",
    )
    p_annotate.add_argument("--query", help="Only rules whose id or label contains this text")
    p_annotate.add_argument(
        "--grammar-only",
        action="store_true",
        help="Drop pieces that carry no role tag",
    )

    # merge
    p_merge = sub.add_parser("merge", help="Validate and merge checker matches")
    p_merge.add_argument("--text", type=Path, required=True, help="Checked text file")
    p_merge.add_argument(
        "--matches",
        type=Path,
        required=True,
        help='JSON file: a list of matches or {"matches": [...]}',
    )
    p_merge.add_argument("--output", type=Path, help="Write merged matches here (default: stdout)")

    # goals
    p_goals = sub.add_parser("goals", help="List the grammar points a text exercises")
    p_goals.add_argument("--input", type=Path, required=True, help="Plain text file")
    p_goals.add_argument("--top", type=int, default=6, help="Number of goals (default: 6)")

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Build configuration from arguments."""
    config = Config.from_yaml(args.config) if args.config else Config()

    if args.input:
        config.input_file = args.input
    if config.input_file is None:
        raise ValueError("Either --config with input_file or --input is required")

    if args.output:
        config.output.output_path = args.output
    if args.format:
        config.output.format = args.format
    if args.engine:
        config.segmentation.engine = args.engine

    # Filter overrides; re-validated so bad values fail here
    filters = config.filters.model_dump()
    if args.stage:
        filters["stages"] = args.stage
    if args.category:
        filters["categories"] = args.category
    if args.query:
        filters["query"] = args.query
    if args.grammar_only:
        filters["grammar_only"] = True
    config.filters = type(config.filters).model_validate(filters)

    return config


def run_annotate(args: argparse.Namespace) -> int:
    config = build_config(args)
    count = AnnotationPipeline(config).run()
    print(f"\nAnnotated {count} records")
    print(f"Results saved to: {config.output.output_path}")
    return 0


def run_merge(args: argparse.Namespace) -> int:
    text = args.text.read_text(encoding="utf-8")
    with open(args.matches, "r", encoding="utf-8") as f:
        raw = json.load(f)
    records = raw.get("matches", []) if isinstance(raw, dict) else raw

    merged = merge_matches(ingest_matches(records, text_length=len(text)))
    rows = []
    for m in merged:
        row = m.to_dict()
        row["group"] = issue_group(m.category)
        rows.append(row)

    payload = json.dumps({"matches": rows}, ensure_ascii=False, indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload, encoding="utf-8")
        print(f"Kept {len(rows)} of {len(records)} matches; saved to {args.output}")
    else:
        print(payload)
    return 0


def run_goals(args: argparse.Namespace) -> int:
    text = args.input.read_text(encoding="utf-8")
    goals = default_registry().learning_goals(text, top_n=args.top)
    print(json.dumps([asdict(g) for g in goals], ensure_ascii=False, indent=2))
    return 0


COMMANDS = {
    "annotate": run_annotate,
    "merge": run_merge,
    "goals": run_goals,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        return COMMANDS[args.command](args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logging.exception("Command failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
