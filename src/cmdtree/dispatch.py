"""Resolve an argument vector to one command and run it.

This is the core algorithm of cmdtree. :func:`execute` is called on a node
with the tokens addressed to it (``args[0]`` is the name it was invoked as)
and walks down the tree one level per call:

1. Check the preconditions: a non-empty vector and a runnable node.
2. Copy the parent's streams onto the node, so streams assigned to the root
   just before running reach every node.
3. Parse the node's own flags from ``args[1:]``. A parse error renders the
   node's help and returns :data:`~cmdtree.exit_codes.EXIT_SERIOUS`.
4. With no positional arguments left, run the node's handler, or show its
   help when it has none.
5. A leading ``help`` is answered by :func:`~cmdtree.help.help_for_command`.
6. A leading child name recurses into that child, which parses its own flags
   from the rest of the tokens.
7. Anything else is passed to the node's handler as positional arguments,
   or answered with the node's help when it has no handler.

The dispatcher never raises for bad user input: it returns
``(exit_code, error)`` and leaves reporting to the caller.
"""

from __future__ import annotations

import os
import sys
from typing import Callable, Optional

from cmdtree.command import Command
from cmdtree.exceptions import CommandConfigError, FlagParseError, InvariantError
from cmdtree.exit_codes import EXIT_SERIOUS, EXIT_SUCCESS
from cmdtree.flags import FlagHelpRequested, FlagSet
from cmdtree.help import help_for_command, show_help
from cmdtree.models import Context, background
from cmdtree.output import debug

Getenv = Callable[[str], Optional[str]]


def run(
    root: Command,
    *args: str,
    context: Optional[Context] = None,
    getenv: Getenv = os.getenv,
) -> tuple[int, Optional[BaseException]]:
    """Run the command tree under *root*.

    With no *args*, ``sys.argv`` is used. Otherwise *args* is used verbatim
    and its first element is taken as the program name.
    """
    argv = list(args) if args else list(sys.argv)
    return execute(root, argv, context=context, getenv=getenv)


def execute(
    cmd: Command,
    args: list[str],
    *,
    context: Optional[Context] = None,
    getenv: Getenv = os.getenv,
) -> tuple[int, Optional[BaseException]]:
    """Execute *cmd* with *args*, ``args[0]`` being the name it was invoked as.

    Returns:
        The ``(exit_code, error)`` pair of the handler that ran, or of the
        help that was shown.

    Raises:
        InvariantError: *args* is empty.
        CommandConfigError: *cmd* has neither a handler nor children.
    """
    if not args:
        raise InvariantError(f"invalid execute {cmd.name!r}")
    if not cmd.is_runnable():
        raise CommandConfigError(f"invalid command {cmd.name!r}", command_name=cmd.name)

    parent = cmd.parent
    if parent is not None:
        cmd.stdin = parent.stdin
        cmd.stdout = parent.stdout
        cmd.stderr = parent.stderr

    flags = cmd.flags if cmd.flags is not None else FlagSet(cmd.name)
    flags.usage = lambda: show_help(cmd)
    flags.output = cmd.stderr
    try:
        flags.parse(args[1:])
    except FlagHelpRequested:
        return EXIT_SUCCESS, None
    except FlagParseError as exc:
        return EXIT_SERIOUS, exc

    remaining = flags.args()
    if not remaining:
        if cmd.handler is not None:
            return _invoke(cmd, flags, context, getenv)
        return help_for_command(cmd, flags)

    if remaining[0] == "help":
        return help_for_command(cmd, flags)

    child = cmd.child(remaining[0])
    if child is not None:
        debug(f"{' '.join(cmd.path())}: descending into {child.name!r}")
        return execute(child, remaining, context=context, getenv=getenv)

    if cmd.handler is not None:
        debug(f"{' '.join(cmd.path())}: {remaining[0]!r} is not a subcommand, running handler")
        return _invoke(cmd, flags, context, getenv)
    debug(f"{' '.join(cmd.path())}: {remaining[0]!r} is not a subcommand, showing help")
    show_help(cmd)
    return EXIT_SUCCESS, None


def _invoke(
    cmd: Command,
    flags: FlagSet,
    context: Optional[Context],
    getenv: Getenv,
) -> tuple[int, Optional[BaseException]]:
    assert cmd.handler is not None
    ctx = (context if context is not None else background()).with_path(cmd.path())
    debug(f"running {' '.join(ctx.path)!r} with args {flags.args()!r}")
    return cmd.handler(ctx, cmd.stdout, flags, getenv, cmd.stdin, cmd.stderr)
