"""
Command-line interface for suggestion validation.

Usage:
    python -m suggest_validation.cli.suggest_cli validate --input <file> [<file> ...] [options]
    python -m suggest_validation.cli.suggest_cli tiers [--config <path>]
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from suggest_validation.context import ValidationContext
from suggest_validation.core.exceptions import ConfigError, MalformedRequestError
from suggest_validation.core.models import TIER_NAMES
from suggest_validation.core.tiers import ValidationMode, load_tier_config
from suggest_validation.core.tiers.tier_config import default_tier_config_path
from suggest_validation.observability.logger import get_logger
from suggest_validation.observability.summary import TIME_WINDOWS

logger = get_logger(__name__)


def outcome_line(path: str, outcome) -> dict:
    """Result document printed for one validated file."""
    verdict = outcome.verdict
    return {
        "file": path,
        "suggestion_id": outcome.suggestion_id,
        "mode": outcome.mode,
        "is_valid": verdict.is_valid,
        "errors": [e.model_dump() for e in verdict.errors],
        "warnings": [w.model_dump() for w in verdict.warnings],
        "tier_summary": {tier: tally.model_dump() for tier, tally in verdict.tier_summary.items()},
        "sanitized": outcome.sanitized,
    }


async def run_validation(args) -> int:
    """
    Validate every input file and print one JSON line per file.

    Returns:
        0 if every file validated, 1 otherwise
    """
    context = ValidationContext.create(tier_config_path=args.config)
    exit_code = 0

    for input_file in args.input:
        input_path = Path(input_file)
        if not input_path.exists():
            logger.error(f"Input file not found: {input_file}")
            print(json.dumps({"file": input_file, "error": "file_not_found"}))
            exit_code = 1
            continue

        try:
            outcome = await context.validate(input_path.read_bytes(), args.mode)
        except MalformedRequestError as e:
            print(json.dumps({"file": input_file, "error": e.kind, "message": e.message}))
            exit_code = 1
            continue

        print(json.dumps(outcome_line(input_file, outcome)))
        if not outcome.is_valid:
            exit_code = 1

    if args.metrics:
        response = context.render_metrics()
        print(response.body, end="")
    if args.summary:
        print(json.dumps(context.get_summary(args.window).body, indent=2))

    return exit_code


def validate_command(args):
    """
    Execute validate command.

    Args:
        args: Command-line arguments
    """
    logger.info(f"Validating {len(args.input)} file(s) in {args.mode} mode")

    try:
        exit_code = asyncio.run(run_validation(args))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(2)

    sys.exit(exit_code)


def tiers_command(args):
    """
    Print tier statistics for a tier configuration document.

    Args:
        args: Command-line arguments
    """
    path = args.config or default_tier_config_path()
    result = load_tier_config(path)
    if isinstance(result, ConfigError):
        logger.error(f"Configuration error: {result}")
        print(f"\nError: {result}", file=sys.stderr)
        sys.exit(2)

    stats = result.tier_statistics()

    print(f"\n{'=' * 60}")
    print(f"TIER CONFIGURATION {result.version}")
    print(f"Source: {path}")
    print(f"{'=' * 60}\n")

    print(f"{'Tier':<20} {'Total':>8} {'Sourced':>8} {'Synthetic':>10} {'Strict':>8}")
    print(f"{'-' * 60}")
    for tier in TIER_NAMES:
        counts = stats[tier]
        strict = "yes" if result.tiers[tier].strict_validation else "no"
        print(f"{tier:<20} {counts['total']:>8} {counts['sourced']:>8} {counts['synthetic']:>10} {strict:>8}")

    print(f"\nCore properties: {', '.join(sorted(result.core_properties))}")
    print(f"\n{'=' * 60}\n")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tiered suggestion validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate a v2 (canonical) submission
  python -m suggest_validation.cli.suggest_cli validate --input suggestion.json

  # Validate legacy submissions and print the metrics exposition
  python -m suggest_validation.cli.suggest_cli validate --input a.json b.json \\
      --mode compatible --metrics

  # Show tier statistics for a custom document
  python -m suggest_validation.cli.suggest_cli tiers --config config/tiers.yaml
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate suggestion JSON files")
    validate_parser.add_argument(
        "--input",
        required=True,
        nargs="+",
        help="Path(s) to JSON suggestion files"
    )
    validate_parser.add_argument(
        "--mode",
        default=ValidationMode.STRICT.value,
        choices=[m.value for m in ValidationMode],
        help="Validation mode (default: strict)"
    )
    validate_parser.add_argument(
        "--config",
        default=None,
        help="Path to tier configuration YAML (default: TIER_CONFIG or packaged document)"
    )
    validate_parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print the Prometheus exposition after validating"
    )
    validate_parser.add_argument(
        "--summary",
        action="store_true",
        help="Print the JSON validation summary after validating"
    )
    validate_parser.add_argument(
        "--window",
        default="all",
        choices=list(TIME_WINDOWS),
        help="Summary time window (default: all)"
    )

    # Tiers command
    tiers_parser = subparsers.add_parser("tiers", help="Show tier configuration statistics")
    tiers_parser.add_argument(
        "--config",
        default=None,
        help="Path to tier configuration YAML"
    )

    # Parse arguments
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Execute command
    if args.command == "validate":
        validate_command(args)
    elif args.command == "tiers":
        tiers_command(args)


if __name__ == "__main__":
    main()
