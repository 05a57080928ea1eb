"""
Command-line interface for the VRAC batch pipeline.

Usage:
    python -m src.cli.batch_cli process [--vrac-root <dir>] [--output <file>] [options]
    python -m src.cli.batch_cli sources [--vrac-root <dir>] [--mappings <file>]
    python -m src.cli.batch_cli report [--artifact <file>]
"""

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from src.batch.errors import PipelineError
from src.batch.pipeline import VracPipeline
from src.batch.readers import load_artifact
from src.core.models import PipelineOptions
from src.core.reference import PHARMACIES
from src.core.sources import SourceRegistry
from src.enrichment import aggregate_by_region, default_registry
from src.observability.logger import get_logger
from src.observability.metrics import start_metrics_server

logger = get_logger(__name__)


def load_environment() -> None:
    """Load .env then .env.local (local values win) from the working directory."""
    load_dotenv(".env")
    load_dotenv(".env.local", override=True)


def build_registry(mappings: str | None) -> SourceRegistry:
    if mappings:
        return SourceRegistry.from_yaml(mappings)
    return SourceRegistry()


def process_command(args: argparse.Namespace) -> int:
    """
    Run the pipeline once and print a JSON run summary.

    Args:
        args: Command-line arguments

    Returns:
        Exit status (0 on success, 1 on fatal error)
    """
    logger.info(f"Starting VRAC processing from {args.vrac_root}")

    try:
        options = PipelineOptions(
            vrac_root=Path(args.vrac_root),
            output_path=Path(args.output),
            enrich=args.enrich,
            max_workers=args.max_workers,
            mappings_path=Path(args.mappings) if args.mappings else None,
            dry_run=args.dry_run,
        )

        if args.metrics_port:
            start_metrics_server(args.metrics_port)
            logger.info(f"Metrics endpoint listening on port {args.metrics_port}")

        result = VracPipeline(options).run()

    except (PipelineError, FileNotFoundError, ValueError) as e:
        logger.error(f"VRAC processing failed: {e}", exc_info=True)
        print(json.dumps({"status": "error", "error": str(e)}), file=sys.stderr)
        return 1

    summary = {
        "status": "dry_run" if args.dry_run else "written",
        "output_path": str(result.output_path) if result.output_path else None,
        "processed_at": result.processed_at.isoformat(),
        "periods": len(result.periods),
        "candidates": result.candidates,
        "parsed": result.parsed,
        "missing": result.missing,
        "unreadable": result.unreadable,
        "discarded": result.discarded,
        "superseded": result.superseded,
    }
    if args.enrich:
        summary["antimalarial_share"] = {
            f"{item.period.pharmacy_id}/{item.period.year}":
                item.field("health_index").antimalarial_share
            for item in result.enriched
        }

    logger.info(
        f"Processed {result.parsed} of {result.candidates} candidates into "
        f"{len(result.periods)} periods"
    )
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


def sources_command(args: argparse.Namespace) -> int:
    """Print the resolved Source Registry for an input root."""
    try:
        registry = build_registry(args.mappings)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not load source mappings: {e}", exc_info=True)
        print(json.dumps({"status": "error", "error": str(e)}), file=sys.stderr)
        return 1

    rows = []
    for candidate in registry.candidates(args.vrac_root):
        found = candidate.existing_path()
        rows.append({
            "pharmacy_id": candidate.mapping.pharmacy_id,
            "year": candidate.mapping.year,
            "dialect": candidate.dialect,
            "file": candidate.mapping.file,
            "path": str(found) if found else None,
            "present": found is not None,
        })

    print(json.dumps({"vrac_root": str(args.vrac_root), "sources": rows}, indent=2))
    return 0


def report_command(args: argparse.Namespace) -> int:
    """
    Recompute the health index from an existing artifact.

    Prints one row per period and one per (region, year) as JSON.
    """
    try:
        output = load_artifact(args.artifact)
        enriched = default_registry().run(output.periods, PHARMACIES)
        regions = aggregate_by_region(enriched)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not build report from {args.artifact}: {e}", exc_info=True)
        print(json.dumps({"status": "error", "error": str(e)}), file=sys.stderr)
        return 1

    periods = []
    for item in enriched:
        row = item.field("health_index").model_dump(mode="json", by_alias=True)
        row["categories"] = item.field("category_breakdown").model_dump(mode="json", by_alias=True)
        row["regionId"] = item.field("region_id")
        periods.append(row)

    report = {
        "processedAt": output.processed_at.isoformat() if output.processed_at else None,
        "periods": periods,
        "regions": [point.model_dump(mode="json", by_alias=True) for point in regions],
    }
    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_environment()

    parser = argparse.ArgumentParser(
        description="VRAC pharmacy sales ingestion pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process the default export tree
  %(prog)s process --vrac-root VRAC --output data/vrac/processed.json

  # Process with enrichment on four parser threads
  %(prog)s process --enrich --max-workers 4

  # Show which source files are present
  %(prog)s sources --vrac-root VRAC

  # Health index from an existing artifact
  %(prog)s report --artifact data/vrac/processed.json
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Process command
    process_parser = subparsers.add_parser("process", help="Run the pipeline")
    process_parser.add_argument(
        "--vrac-root",
        default=os.getenv("VRAC_ROOT", "VRAC"),
        help="Root directory of the export files (default: $VRAC_ROOT or VRAC)"
    )
    process_parser.add_argument(
        "--output",
        default=os.getenv("VRAC_OUTPUT_PATH", "data/vrac/processed.json"),
        help="Artifact path (default: $VRAC_OUTPUT_PATH or data/vrac/processed.json)"
    )
    process_parser.add_argument(
        "--mappings",
        default=os.getenv("VRAC_SOURCE_MAPPINGS"),
        help="Source mapping YAML file (default: $VRAC_SOURCE_MAPPINGS or built-in table)"
    )
    process_parser.add_argument(
        "--max-workers",
        type=int,
        default=int(os.getenv("VRAC_MAX_WORKERS", "1")),
        help="Parser threads (default: $VRAC_MAX_WORKERS or 1)"
    )
    process_parser.add_argument(
        "--enrich",
        action="store_true",
        help="Run the enrichment stages after deduplication"
    )
    process_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run everything except writing the artifact"
    )
    process_parser.add_argument(
        "--metrics-port",
        type=int,
        default=int(os.getenv("METRICS_PORT", "0")),
        help="Expose Prometheus metrics on this port (default: disabled)"
    )

    # Sources command
    sources_parser = subparsers.add_parser("sources", help="Show the resolved source files")
    sources_parser.add_argument(
        "--vrac-root",
        default=os.getenv("VRAC_ROOT", "VRAC"),
        help="Root directory of the export files (default: $VRAC_ROOT or VRAC)"
    )
    sources_parser.add_argument(
        "--mappings",
        default=os.getenv("VRAC_SOURCE_MAPPINGS"),
        help="Source mapping YAML file (default: built-in table)"
    )

    # Report command
    report_parser = subparsers.add_parser("report", help="Health index from an artifact")
    report_parser.add_argument(
        "--artifact",
        default=os.getenv("VRAC_OUTPUT_PATH", "data/vrac/processed.json"),
        help="Artifact path (default: $VRAC_OUTPUT_PATH or data/vrac/processed.json)"
    )

    # Parse arguments
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Execute command
    if args.command == "process":
        return process_command(args)
    elif args.command == "sources":
        return sources_command(args)
    elif args.command == "report":
        return report_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
