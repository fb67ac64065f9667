"""Process entry helper for programs built on cmdtree.

:func:`cmdtree.dispatch.run` returns an ``(exit_code, error)`` pair and leaves
it to the caller to report the error and end the process. :func:`main` is
that caller for the common case::

    def cli() -> None:
        main(build_root())

It installs a SIGINT handler, runs the tree, prints any returned error to
stderr through :mod:`cmdtree.output`, and exits with the returned code.
"""

from __future__ import annotations

import signal
import sys
import traceback
from typing import Any, NoReturn, Optional, Sequence

from cmdtree.command import Command
from cmdtree.config import RunConfig, load_run_config
from cmdtree.dispatch import execute, run
from cmdtree.exceptions import CmdtreeError, FlagParseError
from cmdtree.exit_codes import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_SUCCESS
from cmdtree.output import OutputManager, debug, error, set_output, warning


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def main(
    root: Command,
    argv: Optional[Sequence[str]] = None,
    config: Optional[RunConfig] = None,
) -> NoReturn:
    """Run the tree under *root* and exit the process with its code.

    Args:
        root: Root of the command tree.
        argv: Argument vector, program name first. Defaults to ``sys.argv``.
            An empty vector is passed through and fails as an invalid call.
        config: Diagnostics settings. Resolved from the environment with
            :func:`~cmdtree.config.load_run_config` when omitted.

    Errors returned by the tree are printed as ``Error: <message>``; an error
    returned alongside a success code is printed as a warning. Flag parse
    errors are not repeated, since the flag set has already reported them. A
    :class:`~cmdtree.exceptions.CmdtreeError` raised while running exits with
    the error's ``exit_code``; any other exception exits with
    :data:`~cmdtree.exit_codes.EXIT_FAILURE`.

    Raises:
        SystemExit: Always.
    """
    if config is None:
        config = load_run_config()
    set_output(
        OutputManager(
            no_color=config.no_color,
            quiet=config.quiet,
            verbose=config.verbose,
            stderr=root.stderr,
        )
    )
    _setup_signal_handlers()

    try:
        if argv is None:
            code, err = run(root)
        else:
            code, err = execute(root, list(argv))
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except CmdtreeError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        debug(traceback.format_exc())
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_FAILURE)

    # Flag errors were already written to stderr by the flag set.
    if err is not None and not isinstance(err, FlagParseError):
        if code == EXIT_SUCCESS:
            warning(str(err))
        else:
            error(str(err))
    sys.exit(code)
