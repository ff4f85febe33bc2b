"""
Shared pytest fixtures for the Atomica test suite.

These fixtures expose parsed configuration files and ready-made engines so
tests can build upon them without duplicating I/O logic.
"""

from __future__ import annotations

import logging
import pathlib
import sys
from typing import Any, Dict

import pytest
import yaml

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sim import PhysicsEngine  # noqa: E402


@pytest.fixture(scope="session")
def project_root() -> pathlib.Path:
    """Return repository root directory."""
    return REPO_ROOT


def _load_yaml(path: pathlib.Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)  # type: ignore[no-any-return]


@pytest.fixture(scope="session")
def config_template(project_root: pathlib.Path) -> Dict[str, Any]:
    """Parsed representation of the default scene template."""
    return _load_yaml(project_root / "config" / "template.yaml")


@pytest.fixture(scope="session")
def preset_paths(project_root: pathlib.Path) -> Dict[str, pathlib.Path]:
    presets = project_root / "config" / "presets"
    return {path.stem: path for path in sorted(presets.glob("*.yaml"))}


@pytest.fixture
def engine_logger() -> logging.Logger:
    """A dedicated logger so tests can assert on engine diagnostics with caplog."""
    test_logger = logging.getLogger("atomica.tests.engine")
    test_logger.setLevel(logging.DEBUG)
    return test_logger


@pytest.fixture
def engine(engine_logger: logging.Logger) -> PhysicsEngine:
    return PhysicsEngine(logger_=engine_logger)
