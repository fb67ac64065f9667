"""Typed reads over a parsed :class:`~cmdtree.flags.FlagSet`.

These helpers are meant for use inside handlers, which know the schema of
their own flag set. Each reads the flag's current value as text and converts
it; a failed conversion yields the zero value of the requested type rather
than an error. Asking for a flag the set does not define is a programming
mistake and raises :class:`~cmdtree.exceptions.UndefinedFlagError`.

Example::

    def handler(ctx, stdout, flags, getenv, stdin, stderr):
        for _ in range(flag_int(flags, "times")):
            stdout.write(flag_string(flags, "greeting") + "\\n")
        return EXIT_SUCCESS, None
"""

from __future__ import annotations

from cmdtree.exceptions import UndefinedFlagError
from cmdtree.flags import FlagSet
from cmdtree.models import parse_bool, parse_float, parse_int


def flag_string(flags: FlagSet, name: str) -> str:
    """Return the text form of the flag called *name*."""
    flag = flags.lookup(name)
    if flag is None:
        raise UndefinedFlagError(name)
    return flag.value_string()


def flag_bool(flags: FlagSet, name: str) -> bool:
    """Return the flag as a bool, or ``False`` if it does not read as one."""
    try:
        return parse_bool(flag_string(flags, name))
    except ValueError:
        return False


def flag_int(flags: FlagSet, name: str) -> int:
    """Return the flag as a 64-bit integer, or ``0`` if it does not read as one."""
    try:
        return parse_int(flag_string(flags, name))
    except ValueError:
        return 0


def flag_float(flags: FlagSet, name: str) -> float:
    """Return the flag as a float, or ``0.0`` if it does not read as one."""
    try:
        return parse_float(flag_string(flags, name))
    except ValueError:
        return 0.0
