"""Shared test fixtures for cmdtree.

Provides in-memory streams standing in for the process's standard streams,
a root command wired to them, and a recording handler factory. The global
OutputManager is reset after every test.
"""

from __future__ import annotations

from io import StringIO
from types import SimpleNamespace
from typing import Any, Callable, Optional

import pytest

from cmdtree.command import Command, new_root
from cmdtree.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches a reference to its stderr stream at creation
    time; resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Streams and roots
# ---------------------------------------------------------------------------


@pytest.fixture
def streams() -> SimpleNamespace:
    """In-memory stdin/stdout/stderr."""
    return SimpleNamespace(stdin=StringIO(""), stdout=StringIO(), stderr=StringIO())


@pytest.fixture
def root(streams: SimpleNamespace) -> Command:
    """A root named ``prog`` writing to the in-memory streams."""
    return new_root(
        name="prog",
        short="Root short",
        stdin=streams.stdin,
        stdout=streams.stdout,
        stderr=streams.stderr,
    )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def make_recorder(
    calls: list[SimpleNamespace],
    code: int = 0,
    error: Optional[BaseException] = None,
) -> Callable[..., tuple[int, Optional[BaseException]]]:
    """Build a handler that records each call and returns ``(code, error)``."""

    def handler(ctx: Any, stdout: Any, flags: Any, getenv: Any, stdin: Any, stderr: Any):
        calls.append(
            SimpleNamespace(
                ctx=ctx,
                stdout=stdout,
                flags=flags,
                args=flags.args(),
                getenv=getenv,
                stdin=stdin,
                stderr=stderr,
            )
        )
        return code, error

    return handler


@pytest.fixture
def calls() -> list[SimpleNamespace]:
    """Call log shared with handlers built by :func:`make_recorder`."""
    return []


@pytest.fixture
def recorder(calls: list[SimpleNamespace]) -> Callable[..., Callable[..., Any]]:
    """Factory for recording handlers that log into :func:`calls`."""

    def factory(code: int = 0, error: Optional[BaseException] = None):
        return make_recorder(calls, code, error)

    return factory
