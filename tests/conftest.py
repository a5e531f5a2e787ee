"""Shared pytest fixtures for ngrok probe tests."""

import logging
from collections.abc import Callable

import pytest

from inspection_fakes import ScriptedInspection
from ngrok_probe.common.logging import PACKAGE_LOGGER
from ngrok_probe.discovery import ProbeConfig


@pytest.fixture
def scripted() -> Callable[..., ScriptedInspection]:
    """Factory for scripted inspection endpoints.

    Returns:
        Callable: ScriptedInspection constructor
    """
    return ScriptedInspection


@pytest.fixture
def fast_config() -> ProbeConfig:
    """Probe configuration with timings short enough for unit tests.

    Returns:
        ProbeConfig: No warm-up, 10ms poll interval, 1s budget
    """
    return ProbeConfig(
        initial_delay=0.0,
        poll_interval=0.01,
        poll_timeout=1.0,
        request_timeout=1.0,
    )


@pytest.fixture
def log_lines() -> list[str]:
    """List collecting lines written to a probe's log sink."""
    return []


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo setup_logging() after each test.

    This prevents tests from interfering with each other's logging setup.
    """
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
