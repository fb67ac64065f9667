"""Help text for command nodes.

:func:`render_help` is a pure function of a node, its ancestry, its flags and
its children. The text has up to four blocks::

    Print args to stdout

    Usage:
      prog foo bah print [-capitalize] <some text>

    Flags:
      -capitalize    \tcapitalize output

    This is the long text

and, for nodes with children, a ``Commands:`` listing followed by a
``Use '<path> help <command>' ...`` hint. Help is never colorized.

:func:`help_for_command` implements the ``help [<command>]`` pseudo
subcommand available at every node.
"""

from __future__ import annotations

import json
from typing import IO, Optional

from cmdtree.command import Command
from cmdtree.exceptions import HelpArgumentsError, UnknownCommandError, UsageError
from cmdtree.exit_codes import EXIT_SERIOUS, EXIT_SUCCESS
from cmdtree.flags import FlagSet
from cmdtree.models import Flag, FlagKind

# Continuation lines of a flag's usage text start here.
_USAGE_INDENT = "\n    \t"


def render_help(cmd: Command) -> str:
    """Build the help text for *cmd*."""
    names = " ".join(cmd.path())
    result = f"{cmd.short}\n\nUsage:\n  {names}"
    if cmd.usage:
        result += f" {cmd.usage}"
    if cmd.children:
        result += " <command>"
    result += "\n"

    help_text = flag_help(cmd.flags)
    if help_text:
        result += f"\nFlags:\n{help_text}"

    if cmd.children:
        width = cmd.longest_child_name_length
        result += "\nCommands:\n"
        for name in sorted(cmd.children):
            child = cmd.children[name]
            short = child.short.removesuffix(".")
            result += f"  {child.name:<{width}} {short}\n"
        result += f"\nUse '{names} help <command>' for more information about a command.\n"

    long_text = cmd.long.strip()
    if long_text:
        result += f"\n{long_text}\n"
    return result


def show_help(cmd: Command, out: Optional[IO[str]] = None) -> None:
    """Write the help text for *cmd* to *out*, or to the node's stdout."""
    stream = out if out is not None else cmd.stdout
    if stream is None:
        raise ValueError(f"command {cmd.name!r} has no output stream")
    stream.write(render_help(cmd))


def flag_help(flags: Optional[FlagSet]) -> str:
    """Render one line per flag, in lexicographic order."""
    if flags is None:
        return ""
    return "".join(_flag_line(flag) for flag in flags)


def _flag_line(flag: Flag) -> str:
    line = f"  -{flag.name}"
    hint, usage = unquote_usage(flag)
    if hint:
        line += f" {hint}"
    # A one-letter flag without a hint keeps its usage close by.
    if len(line) <= 4:
        line += "\t"
    else:
        line += "    \t"
    line += usage.replace("\n", _USAGE_INDENT)
    if not flag.is_zero():
        if flag.kind == FlagKind.STRING:
            line += f" (default {json.dumps(flag.def_value, ensure_ascii=False)})"
        else:
            line += f" (default {flag.def_value})"
    return line + "\n"


def unquote_usage(flag: Flag) -> tuple[str, str]:
    """Split a flag's usage into a value hint and the display usage.

    The first back-quoted word in the usage becomes the hint and loses its
    quotes in the usage: ``"a `file` to read"`` gives ``("file", "a file to
    read")``. Without back quotes the hint is the flag's kind, or empty for
    bool flags.
    """
    usage = flag.usage
    start = usage.find("`")
    if start != -1:
        end = usage.find("`", start + 1)
        if end != -1:
            hint = usage[start + 1 : end]
            return hint, usage[:start] + hint + usage[end + 1 :]
    if flag.kind == FlagKind.BOOL:
        return "", usage
    return flag.kind.value, usage


def help_for_command(cmd: Command, flags: FlagSet) -> tuple[int, Optional[UsageError]]:
    """Resolve ``help [<command>]`` against *cmd*'s positional arguments.

    A leading ``help`` is dropped. With no name left, *cmd*'s own help is
    shown; with one name, that child's help is shown. Anything else shows
    *cmd*'s help and returns :data:`~cmdtree.exit_codes.EXIT_SERIOUS` with
    the matching error. All help is written to *cmd*'s stdout.
    """
    args = flags.args()
    if args and args[0] == "help":
        args = args[1:]

    if len(args) > 1:
        show_help(cmd)
        return EXIT_SERIOUS, HelpArgumentsError()

    if not args:
        show_help(cmd)
        return EXIT_SUCCESS, None

    child = cmd.child(args[0])
    if child is None:
        show_help(cmd)
        return EXIT_SERIOUS, UnknownCommandError(args[0])
    show_help(child, out=cmd.stdout)
    return EXIT_SUCCESS, None
