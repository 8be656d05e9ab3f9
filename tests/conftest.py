"""Pytest configuration and fixtures for fastjade tests."""

import pytest

from fastjade import DictLoader, Environment
from fastjade.environment import terminal


@pytest.fixture(autouse=True)
def _plain_terminal(monkeypatch):
    """Keep error messages free of ANSI codes regardless of the runner's TTY."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


@pytest.fixture
def seen():
    """Diagnostics sink that records into a list."""
    return []


@pytest.fixture
def env(seen):
    """Environment whose diagnostics are recorded instead of logged."""
    return Environment(diagnostics=seen.append)


@pytest.fixture
def env_strict():
    """Environment that promotes warnings to errors."""
    return Environment(warnings_as_errors=True, diagnostics=lambda d: None)


@pytest.fixture
def env_with_loader(seen):
    """Environment with a DictLoader and a few named templates."""
    loader = DictLoader(
        {
            "index.jade": "h1= title\np Welcome",
            "users/list.jade": "ul\n  - for user in users\n    li= user",
            "users/card.jade": ".card\n  h2= user",
            "broken.jade": "p= (",
        }
    )
    return Environment(loader=loader, diagnostics=seen.append)


def render(env: Environment, source: str, **context) -> str:
    """Compile and render in one step."""
    return env.from_string(source).render(context)
