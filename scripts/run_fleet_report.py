"""Aggregate fleet emissions by vehicle, carlist, fuel type or period."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import _path_setup  # noqa: F401

from config_paths import get_config_path, load_config, resolve_output_path  # noqa: E402
from fleet_reporting.runner import (  # noqa: E402
    DEFAULT_OUTPUT_DIRECTORY,
    run_from_config,
    write_fleet_report,
)

LOGGER = logging.getLogger("fleet_reporting.run")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")

    parser = argparse.ArgumentParser(description="Build the fleet emission report")
    parser.add_argument("--config", help="Path to config.yaml (defaults to the repository config)")
    parser.add_argument("--output-dir", help="Override fleet_reporting.output_directory")
    args = parser.parse_args()

    config_path = Path(args.config) if args.config else get_config_path()
    report = run_from_config(config_path)

    _, config = load_config(config_path)
    directory_setting = args.output_dir or config.get("fleet_reporting", {}).get(
        "output_directory", DEFAULT_OUTPUT_DIRECTORY
    )
    paths = write_fleet_report(report, resolve_output_path(config, directory_setting))
    for name, path in paths.items():
        LOGGER.info("Wrote %s to %s", name, path)
    if not report.aggregations.empty:
        LOGGER.info("Aggregations:\n%s", report.aggregations.to_string(index=False))


if __name__ == "__main__":
    main()
