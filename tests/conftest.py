"""
Shared pytest fixtures for envview tests.

Provides sample annotated documents and engine configuration.
"""

from pathlib import Path

import pytest

from envview.config.models import EngineConfig


SAMPLE_DOCUMENT = """\
# Service settings
// @env-template
APP_NAME=demo
PORT=3000
LOG_LEVEL=info
API_URL="https://api.dev.example.com"

// @env-mode:env.dev
// PORT=3000
// API_URL=https://api.dev.example.com

// @env-mode:env.prod
// PORT=8080
// API_URL=https://api.example.com
// APP_NAME=renamed

// @env-mode:logging.quiet
// LOG_LEVEL=error

// @env-value:APP_NAME(text constant)
// @env-value:(LOG_LEVEL)
// debug, info
// warn, error
// @env-value:PORT(number disabled)
"""


@pytest.fixture
def engine_config() -> EngineConfig:
    """Default engine configuration with a fixed line terminator."""
    return EngineConfig(line_terminator="\n")


@pytest.fixture
def sample_lines() -> list[str]:
    """Lines of a realistic annotated document."""
    return SAMPLE_DOCUMENT.splitlines()


@pytest.fixture
def sample_env_file(tmp_path: Path) -> Path:
    """Sample document written to disk."""
    path = tmp_path / ".env"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path
