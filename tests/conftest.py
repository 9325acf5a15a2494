"""
Shared pytest fixtures for configninja tests.

Provides a helper for writing config directories, an isolated Registry per
test, and a Typer CLI runner.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# Put `src/` first so `import configninja` uses workspace code.
_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from configninja.core.options import ENVIRONMENT_SELECTOR  # noqa: E402
from configninja.core.registry import Registry  # noqa: E402
from configninja.utils import logger as logger_module  # noqa: E402
from configninja.utils.logger import LOGGER_NAME  # noqa: E402


# ============================================================================
# Config Directory Fixtures
# ============================================================================

@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Write ``{name}.config.json`` (or ``{name}.json`` with short=True) into tmp_path/config."""
    config_dir = tmp_path / "config"
    config_dir.mkdir(exist_ok=True)

    def _write(name: str, content: Any, short: bool = False, raw: bool = False) -> Path:
        suffix = ".json" if short else ".config.json"
        path = config_dir / f"{name}{suffix}"
        path.write_text(content if raw else json.dumps(content), encoding="utf-8")
        return path

    _write.directory = config_dir  # type: ignore[attr-defined]
    return _write


@pytest.fixture
def config_dir(write_config) -> Path:
    """A config directory with production, staging and local files."""
    write_config("production", {"a": 1, "nested": {"number": 1, "keep": "prod"}, "list": [1, 2]})
    write_config("staging", {"b": 2, "nested": {"number": 2}, "list": [3]})
    write_config("local", {"nested": {"number": 3}})
    return write_config.directory


@pytest.fixture
def registry() -> Registry:
    """Isolated registry so tests never share cache entries."""
    return Registry()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the environment selector from leaking in from the host."""
    monkeypatch.delenv(ENVIRONMENT_SELECTOR, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging (the CLI installs them per invocation)."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger_module._logger = None


@pytest.fixture
def typer_test_client():
    """Typer test client for CLI testing."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def sample_mapping() -> Dict[str, str]:
    return {"DB_HOST": "database.host", "DB_PORT": "database.port", "FEATURE_ON": "features.on"}
