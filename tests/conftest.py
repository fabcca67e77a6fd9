"""Pytest configuration and fixtures.

Provides environment isolation and shared test doubles. Fixtures here are
autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass
import os

import pytest

from transaction_helpers.config import reset_config

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class CloneableDetail:
    """Detail payload that tracks how many times it was cloned."""

    payload: dict
    clones: int = 0

    def clone(self) -> CloneableDetail:
        self.clones += 1
        return CloneableDetail(payload=dict(self.payload))


class CloneableFault(Exception):
    """Exception that supports cloning."""

    def clone(self) -> CloneableFault:
        return CloneableFault(*self.args)


@pytest.fixture
def cloneable_detail() -> CloneableDetail:
    return CloneableDetail(payload={"field": "email", "reason": "taken"})


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "transaction_helpers.config.load_dotenv",
            lambda *_args, **_kwargs: False,
        )


@pytest.fixture(autouse=True)
def isolate_env(request, monkeypatch):
    """Clear TRANSACTION_HELPERS_* variables and the cached config.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if not request.node.get_closest_marker("allow_env_pollution"):
        for key in list(os.environ.keys()):
            if key.startswith("TRANSACTION_HELPERS_"):
                monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()
