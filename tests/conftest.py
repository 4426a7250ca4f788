"""Pytest configuration and shared fixtures.

Test Categories:
| Category    | Focus                        | Tools                    |
| Unit        | Individual components        | pytest, mock, fakes      |
| Integration | Engine + real shell commands | pytest-asyncio, CliRunner |
"""

import io
import logging
import sys
from pathlib import Path

import pytest
import structlog
from rich.console import Console

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cliprogress.config.settings import ProgressSettings
from cliprogress.core.engine import ProgressEngine
from tests.fixtures.progress_fakes import FakeExecutor, make_console

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (real subprocesses)"
    )
    config.addinivalue_line("markers", "slow: Slow tests (may take > 1s)")


# =============================================================================
# CONSOLE FIXTURES
# =============================================================================


@pytest.fixture
def output() -> io.StringIO:
    """Captured stdout-side terminal output."""
    return io.StringIO()


@pytest.fixture
def error_output() -> io.StringIO:
    """Captured stderr-side terminal output."""
    return io.StringIO()


@pytest.fixture
def console(output) -> Console:
    return make_console(output)


@pytest.fixture
def error_console(error_output) -> Console:
    return make_console(error_output)


# =============================================================================
# ENGINE FIXTURES
# =============================================================================


@pytest.fixture
def fast_settings() -> ProgressSettings:
    """Settings with short intervals so timer-driven tests finish quickly."""
    return ProgressSettings(
        render_interval_ms=5,
        sample_interval_ms=5,
        snap_interval_ms=0,
    )


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def engine(fast_settings, console, error_console, fake_executor) -> ProgressEngine:
    return ProgressEngine(
        fast_settings,
        console=console,
        error_console=error_console,
        executor=fake_executor,
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any logging configuration a test installs."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
