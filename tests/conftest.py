"""Make ``src`` importable without installation and share config fixtures."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[dict], Path]:
    """Write a config mapping to ``tmp_path/config.yaml`` (JSON is valid YAML)."""

    def _write(config: dict) -> Path:
        path = tmp_path / "config.yaml"
        path.write_text(json.dumps(config))
        return path

    return _write
