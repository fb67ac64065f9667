"""Diagnostic output on stderr.

Help text and handler output go to the command's own streams; this module is
only for messages *about* a run: errors surfaced by :func:`cmdtree.app.main`,
warnings, and debug traces from the dispatcher.

* **stderr only** -- diagnostics never contaminate the data stream.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb`` and the
  ``no_color`` option. Colour is never used when the stream is not a TTY.

The module exposes two layers:

1. :class:`OutputManager` -- holds the Rich console and the quiet/verbose
   flags. Created by :func:`cmdtree.app.main` and installed via
   :func:`set_output`.
2. Module-level convenience functions (:func:`error`, :func:`warning`,
   :func:`debug`) that delegate to the global ``OutputManager`` so callers
   do not need to pass the manager around.
"""

from __future__ import annotations

import os
import sys
from typing import IO, Optional

from rich.console import Console
from rich.markup import escape


class OutputManager:
    """Routes diagnostic messages to stderr.

    Args:
        no_color: Disable all colour and Rich markup.
        quiet: Suppress warnings.
        verbose: Enable debug-level messages.
        stderr: Stream to write to. Defaults to ``sys.stderr`` at the time
            the manager is created.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        stderr: Optional[IO[str]] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._file = stderr if stderr is not None else sys.stderr
        self._console = Console(
            file=self._file,
            no_color=self._no_color,
            highlight=False,
            soft_wrap=True,
        )

    @property
    def is_quiet(self) -> bool:
        """Whether quiet mode is enabled."""
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    def error(self, message: str) -> None:
        """Print a bold-red error. Never suppressed."""
        if self._no_color:
            self._plain(f"Error: {message}")
        else:
            self._console.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def warning(self, message: str) -> None:
        """Print a yellow warning. Suppressed by ``quiet``."""
        if self._quiet:
            return
        if self._no_color:
            self._plain(f"Warning: {message}")
        else:
            self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def debug(self, message: str) -> None:
        """Print a debug message, prefixed with ``[debug]``. Only shown when ``verbose``."""
        if not self._verbose:
            return
        if self._no_color:
            self._plain(f"[debug] {message}")
        else:
            self._console.print(f"[dim]\\[debug] {escape(message)}[/dim]")

    def _plain(self, text: str) -> None:
        print(text, file=self._file, flush=True)


def _should_disable_color() -> bool:
    """Check if color should be disabled.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global OutputManager."""
    get_output().warning(message)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)
