from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigLoader, ImportConfig
from .logger import setup_logger
from .orchestrator import ImportOrchestrator


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="graph-stats",
        description="Compute vertex and edge cardinality statistics for a graph CSV export",
    )
    parser.add_argument("csv_dir", type=Path, help="Dataset root holding the static/ and dynamic/ directories")
    parser.add_argument("output_file", type=Path, help="Where to write the statistics JSON")
    parser.add_argument("--config", type=Path, default=None, help="Optional configuration file (YAML or JSON)")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    parser.add_argument(
        "--permissive",
        action="store_true",
        help="Skip records with bad identifiers instead of aborting the run",
    )
    parser.add_argument("--queue-capacity", type=int, default=None, help="Records buffered ahead of the accumulator")
    parser.add_argument("--no-progress", action="store_true", help="Disable per-file progress bars")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ImportConfig:
    config = ConfigLoader(args.config).load() if args.config else ImportConfig()
    return config.with_overrides(
        input_root=str(args.csv_dir),
        output_file=str(args.output_file),
        strict=False if args.permissive else None,
        queue_capacity=args.queue_capacity,
        show_progress=False if args.no_progress else None,
        log_file=str(args.log_file) if args.log_file else None,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        config = build_config(args)
    except (OSError, ValueError) as exc:
        setup_logger().error("Cannot load configuration %s: %s", args.config, exc)
        return 1

    try:
        orchestrator = ImportOrchestrator(config)
    except (OSError, ValueError) as exc:
        setup_logger().error("Cannot start import: %s", exc)
        return 1

    try:
        orchestrator.run()
    except Exception:  # logged by the orchestrator
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
