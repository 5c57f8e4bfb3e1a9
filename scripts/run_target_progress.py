"""Report progress against the emission targets configured in ``config.yaml``.

Targets without their own ``current_emissions`` can take the fleet total from a
vehicle results CSV produced by ``run_vehicle_emissions.py`` (``--emissions-csv``).
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

import pandas as pd

import _path_setup  # noqa: F401

from config_paths import get_config_path, load_config, resolve_output_path  # noqa: E402
from target_tracking.progress import sum_period_emissions  # noqa: E402
from target_tracking.runner import (  # noqa: E402
    DEFAULT_OUTPUT_FILE,
    run_from_config,
    write_target_progress,
)

LOGGER = logging.getLogger("target_tracking.run")


def _fleet_total(path: Path) -> float:
    if not path.exists():
        raise FileNotFoundError(f"Vehicle results not found: {path}")
    df = pd.read_csv(path, comment="#")
    if "real_kg" not in df.columns:
        raise ValueError(f"{path} has no 'real_kg' column.")
    return sum_period_emissions(df["real_kg"].astype(float))


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")

    parser = argparse.ArgumentParser(description="Evaluate emission target progress")
    parser.add_argument("--config", help="Path to config.yaml (defaults to the repository config)")
    parser.add_argument(
        "--now",
        help="Reference date (ISO format); overrides target_tracking.now",
    )
    parser.add_argument(
        "--emissions-csv",
        help="Vehicle results CSV whose real_kg total fills targets lacking current_emissions",
    )
    parser.add_argument("--output", help="Override target_tracking.output_file")
    args = parser.parse_args()

    config_path = Path(args.config) if args.config else get_config_path()
    now = datetime.fromisoformat(args.now) if args.now else None
    default_current = None
    if args.emissions_csv:
        default_current = _fleet_total(Path(args.emissions_csv))
        LOGGER.info("Fleet real emissions from %s: %.2f kg", args.emissions_csv, default_current)

    results = run_from_config(config_path, now=now, default_current_emissions=default_current)

    _, config = load_config(config_path)
    output_setting = args.output or config.get("target_tracking", {}).get(
        "output_file", DEFAULT_OUTPUT_FILE
    )
    destination = write_target_progress(results, resolve_output_path(config, output_setting))
    LOGGER.info("Progress for %d targets written to %s", len(results), destination)


if __name__ == "__main__":
    main()
