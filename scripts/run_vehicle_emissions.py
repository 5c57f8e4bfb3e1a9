"""Calculate theoretical and real emissions for the vehicles in ``config.yaml``.

Results are written as one CSV row per vehicle to
``vehicle_emissions.output_file`` (default ``results/emissions/vehicle_emissions.csv``).
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import _path_setup  # noqa: F401

from config_paths import get_config_path, load_config, resolve_output_path  # noqa: E402
from vehicle_emissions.runner import DEFAULT_OUTPUT_FILE, run_from_config  # noqa: E402
from vehicle_emissions.writers import write_vehicle_results  # noqa: E402

LOGGER = logging.getLogger("vehicle_emissions.run")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")

    parser = argparse.ArgumentParser(description="Calculate per-vehicle CO2e emissions")
    parser.add_argument("--config", help="Path to config.yaml (defaults to the repository config)")
    parser.add_argument("--output", help="Override vehicle_emissions.output_file")
    args = parser.parse_args()

    config_path = Path(args.config) if args.config else get_config_path()
    runs = run_from_config(config_path)

    _, config = load_config(config_path)
    output_setting = args.output or config.get("vehicle_emissions", {}).get(
        "output_file", DEFAULT_OUTPUT_FILE
    )
    destination = write_vehicle_results(runs, resolve_output_path(config, output_setting))
    LOGGER.info("Vehicle emissions for %d vehicles written to %s", len(runs), destination)


if __name__ == "__main__":
    main()
