"""Helpers to load the YAML configuration and resolve input and output paths."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, MutableMapping

import yaml

REPO_ROOT = Path(__file__).resolve().parents[1]

CONFIG_ENV_VAR = "FLEET_EMISSIONS_CONFIG_PATH"
CONFIG_ROOT_KEY = "_config_root"


def get_config_path(default: Path | None = None) -> Path:
    """Return the configuration path, honouring FLEET_EMISSIONS_CONFIG_PATH when set."""

    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()
    if default is not None:
        return default.resolve()
    return (REPO_ROOT / "config.yaml").resolve()


def load_config(config_path: Path | str | None = None) -> tuple[Path, dict]:
    """Read the YAML configuration and annotate it with its directory."""

    path = Path(config_path) if config_path is not None else get_config_path()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open(encoding="utf-8") as handle:
        config = yaml.safe_load(handle) or {}
    if not isinstance(config, MutableMapping):
        raise ValueError(f"Config file {path} must contain a mapping at the top level.")
    set_config_root(config, path.parent)
    return path, dict(config)


def sanitize_run_directory(value: str | None) -> str | None:
    """Return a safe run-directory component (no absolutes, no parent traversals)."""

    if value is None:
        return None
    candidate = value.strip()
    if not candidate:
        return None
    path = Path(candidate)
    if path.is_absolute():
        raise ValueError("results.run_directory must be a relative path.")
    parts = [part for part in path.parts if part not in ("", ".", "..")]
    if not parts:
        return None
    return "/".join(parts)


def set_config_root(config: MutableMapping[str, object], root: Path) -> None:
    """Annotate a config mapping with its filesystem root for relative paths."""

    if not isinstance(config, MutableMapping):
        return
    config[CONFIG_ROOT_KEY] = str(root.resolve())


def get_config_root(config: Mapping[str, object], fallback: Path | None = None) -> Path:
    """Return the base directory that relative paths should resolve against."""

    if isinstance(config, Mapping):
        value = config.get(CONFIG_ROOT_KEY)
        if isinstance(value, str):
            try:
                return Path(value).expanduser().resolve()
            except OSError:
                pass
    return (fallback or REPO_ROOT).resolve()


def get_results_run_directory(config: Mapping[str, object] | None) -> str | None:
    """Extract the ``results.run_directory`` value from the root configuration mapping."""

    if not isinstance(config, Mapping):
        return None
    results_cfg = config.get("results")
    if not isinstance(results_cfg, Mapping):
        return None
    raw_value = results_cfg.get("run_directory")
    if raw_value is None:
        return None
    return sanitize_run_directory(str(raw_value))


def apply_results_run_directory(
    path: Path,
    run_directory: str | None,
    *,
    repo_root: Path | None = None,
) -> Path:
    """Insert the run directory between ``results/`` and the remainder of the path."""

    if not run_directory:
        return path

    root = repo_root or REPO_ROOT
    absolute = path if path.is_absolute() else (root / path)

    try:
        rel = absolute.relative_to(root)
    except ValueError:
        return absolute

    parts = rel.parts
    if not parts or parts[0] != "results":
        return absolute

    new_rel = Path("results") / run_directory / Path(*parts[1:])
    return (root / new_rel).resolve()


def resolve_output_path(config: Mapping[str, object], value: str | Path) -> Path:
    """Resolve an output setting against the config root and the active run directory."""

    root = get_config_root(config)
    path = Path(value)
    if not path.is_absolute():
        path = (root / path).resolve()
    return apply_results_run_directory(
        path, get_results_run_directory(config), repo_root=root
    )


def resolve_input_path(config: Mapping[str, object], value: str | Path) -> Path:
    """Resolve an input file setting against the config root."""

    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return (get_config_root(config) / path).resolve()
