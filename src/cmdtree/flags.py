"""Per-command flag sets parsed with click.

A :class:`FlagSet` is the collection of named, typed options recognised by
one command node. Definitions are made with :meth:`FlagSet.add_string`,
:meth:`FlagSet.add_bool`, :meth:`FlagSet.add_int` and
:meth:`FlagSet.add_float`; :meth:`FlagSet.parse` consumes the flags at the
front of a token list and leaves the positional remainder in
:meth:`FlagSet.args`.

**Syntax accepted by parse**

* ``-name`` and ``--name`` are equivalent.
* Non-bool flags take a value as ``-name=value`` or ``-name value``.
* Bool flags are switches (``-name``) or take an explicit ``-name=false``.
* Scanning stops at the first positional token or a lone ``-``; ``--`` stops
  scanning and is consumed.

Value conversion and ``--`` handling are done by a throwaway
:class:`click.Command` built from the non-bool definitions. Before handing
the tokens over, :meth:`FlagSet._normalize` walks the flag section once: it
reports unknown flags, answers ``-h``/``-help``, resolves bool switches
itself, and rewrites every valued flag to the ``--flag_N`` option declared
for it, so one-letter flags accept ``-x=value`` and any flag name is safe
from click's own declaration syntax.
"""

from __future__ import annotations

from typing import IO, Any, Callable, Iterator, Optional

import click
from pydantic import ValidationError
from click.core import ParameterSource

from cmdtree.exceptions import FlagDefinitionError, FlagParseError
from cmdtree.models import Flag, FlagKind, parse_bool, parse_float, parse_int


def _reason(exc: ValueError) -> str:
    """Short description of a conversion failure, in the flag package's words."""
    return "value out of range" if "out of range" in str(exc) else "parse error"


class _IntType(click.ParamType):
    """64-bit integers with base prefixes (``0x10``, ``017``, ``0b1``)."""

    name = "integer"

    def convert(
        self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]
    ) -> int:
        if isinstance(value, int):
            return value
        try:
            return parse_int(value)
        except ValueError as exc:
            self.fail(_reason(exc), param, ctx)


class _FloatType(click.ParamType):
    """Floats without digit separators (``1_0`` is rejected)."""

    name = "float"

    def convert(
        self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]
    ) -> float:
        if isinstance(value, float):
            return value
        try:
            return parse_float(value)
        except ValueError as exc:
            self.fail(_reason(exc), param, ctx)


_CLICK_TYPES: dict[FlagKind, click.ParamType] = {
    FlagKind.STRING: click.STRING,
    FlagKind.INT: _IntType(),
    FlagKind.FLOAT: _FloatType(),
}

_HELP_NAMES = ("h", "help")


class FlagHelpRequested(Exception):
    """Raised by :meth:`FlagSet.parse` after ``-h`` or ``-help`` showed usage."""


class FlagSet:
    """The flags recognised by one command.

    Args:
        name: Name used in diagnostics, normally the owning command's name.

    Attributes:
        usage: Called when the user asks for help or a parse error occurs.
            The dispatcher replaces it with a callback that renders the
            owning command's help.
        output: Stream receiving parse error messages. ``None`` discards them.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.usage: Callable[[], None] = lambda: None
        self.output: Optional[IO[str]] = None
        self._flags: dict[str, Flag] = {}
        self._args: list[str] = []
        self._parsed = False

    # ------------------------------------------------------------------ #
    # Definition
    # ------------------------------------------------------------------ #

    def add(self, name: str, kind: FlagKind, default: Any = None, usage: str = "") -> Flag:
        """Define a flag and return it.

        Raises:
            FlagDefinitionError: If the name is empty, starts with ``-``,
                contains ``=``, or is already defined, or the
                default is not a valid value of *kind*.
        """
        if not name or name.startswith("-") or "=" in name:
            raise FlagDefinitionError(f"flag {name!r} has an invalid name")
        if name in self._flags:
            raise FlagDefinitionError(f"{self.name} flag redefined: {name}")
        try:
            flag = Flag(name=name, kind=kind, default=default, usage=usage)
        except ValidationError as exc:
            raise FlagDefinitionError(
                f"invalid default {default!r} for flag {name}"
            ) from exc
        self._flags[name] = flag
        return flag

    def add_string(self, name: str, default: str = "", usage: str = "") -> Flag:
        return self.add(name, FlagKind.STRING, default, usage)

    def add_bool(self, name: str, default: bool = False, usage: str = "") -> Flag:
        return self.add(name, FlagKind.BOOL, default, usage)

    def add_int(self, name: str, default: int = 0, usage: str = "") -> Flag:
        return self.add(name, FlagKind.INT, default, usage)

    def add_float(self, name: str, default: float = 0.0, usage: str = "") -> Flag:
        return self.add(name, FlagKind.FLOAT, default, usage)

    # ------------------------------------------------------------------ #
    # Inspection
    # ------------------------------------------------------------------ #

    def __len__(self) -> int:
        return len(self._flags)

    def __iter__(self) -> Iterator[Flag]:
        """Iterate over all flags in lexicographic order."""
        for name in sorted(self._flags):
            yield self._flags[name]

    def lookup(self, name: str) -> Optional[Flag]:
        """Return the flag called *name*, or ``None``."""
        return self._flags.get(name)

    def visit_all(self, fn: Callable[[Flag], None]) -> None:
        """Call *fn* for every defined flag in lexicographic order."""
        for flag in self:
            fn(flag)

    def visit(self, fn: Callable[[Flag], None]) -> None:
        """Call *fn* for every flag set during the last parse, in lexicographic order."""
        for flag in self:
            if flag.actual:
                fn(flag)

    def set(self, name: str, text: str) -> None:
        """Set the flag called *name* from command-line text.

        Raises:
            FlagParseError: If the flag is not defined or *text* is invalid.
        """
        flag = self._flags.get(name)
        if flag is None:
            raise FlagParseError(f"no such flag -{name}", flag_name=name)
        try:
            flag.set(text)
        except ValueError as exc:
            raise FlagParseError(
                f'invalid value "{text}" for flag -{name}: {_reason(exc)}', flag_name=name
            ) from exc

    @property
    def parsed(self) -> bool:
        """Whether :meth:`parse` has been called."""
        return self._parsed

    def args(self) -> list[str]:
        """Positional arguments left over after the last parse."""
        return list(self._args)

    def narg(self) -> int:
        return len(self._args)

    def arg(self, i: int) -> str:
        """The *i*-th positional argument, or ``""`` if there is none."""
        if 0 <= i < len(self._args):
            return self._args[i]
        return ""

    # ------------------------------------------------------------------ #
    # Parsing
    # ------------------------------------------------------------------ #

    def parse(self, tokens: list[str]) -> None:
        """Parse flags from the front of *tokens*.

        On success the flag values are updated and the positional remainder
        is available from :meth:`args`. On failure the error message is
        written to :attr:`output`, :attr:`usage` is called, and the error is
        raised.

        Raises:
            FlagHelpRequested: ``-h`` or ``-help`` was given and the set does
                not define a flag of that name. :attr:`usage` has been called.
            FlagParseError: A flag was unknown, lacked its value, or had an
                invalid value.
        """
        self._parsed = True
        for flag in self._flags.values():
            flag.actual = False
        try:
            self._parse(list(tokens))
        except FlagParseError as exc:
            if self.output is not None:
                self.output.write(f"{exc}\n")
            self.usage()
            raise

    def _parse(self, tokens: list[str]) -> None:
        normalized, bool_values, raw_values = self._normalize(tokens)
        command = self._click_command()
        try:
            ctx = command.make_context(self.name or "flags", normalized)
        except click.BadOptionUsage as exc:
            flag = self._flag_for_key(exc.option_name)
            name = flag.name if flag is not None else exc.option_name.lstrip("-")
            raise FlagParseError(f"flag needs an argument: -{name}", flag_name=name) from exc
        except click.BadParameter as exc:
            flag = self._flag_for_key(exc.param.name if exc.param is not None else None)
            name = flag.name if flag is not None else ""
            raise FlagParseError(
                f'invalid value "{raw_values.get(name, "")}" for flag -{name}: {exc.message}',
                flag_name=name or None,
            ) from exc
        except click.UsageError as exc:
            raise FlagParseError(exc.format_message()) from exc

        for index, flag in enumerate(self._valued_flags()):
            key = _param_name(index)
            if ctx.get_parameter_source(key) == ParameterSource.COMMANDLINE:
                flag.value = ctx.params[key]
                flag.actual = True
        for name, value in bool_values.items():
            flag = self._flags[name]
            flag.value = value
            flag.actual = True
        self._args = list(ctx.args)

    def _normalize(
        self, tokens: list[str]
    ) -> tuple[list[str], dict[str, bool], dict[str, str]]:
        """Rewrite the flag section of *tokens* into the form click expects.

        Valued flags are rewritten to the ``--flag_N`` option declared for
        them, so a user's flag name never reaches click's declaration
        syntax. Bool flags are removed. Returns the rewritten tokens, the
        final value of each bool flag that was given, and the last raw text
        given for each valued flag (the last occurrence wins in both).
        """
        keys = {flag.name: _param_name(i) for i, flag in enumerate(self._valued_flags())}
        out: list[str] = []
        bool_values: dict[str, bool] = {}
        raw_values: dict[str, str] = {}
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token == "--" or token == "-" or not token.startswith("-"):
                break
            body = token[2:] if token.startswith("--") else token[1:]
            if not body or body.startswith("-") or body.startswith("="):
                raise FlagParseError(f"bad flag syntax: {token}")
            name, has_value, value = body.partition("=")
            flag = self._flags.get(name)
            if flag is None:
                if name in _HELP_NAMES:
                    self.usage()
                    raise FlagHelpRequested(name)
                raise FlagParseError(f"flag provided but not defined: -{name}", flag_name=name)

            if flag.kind == FlagKind.BOOL:
                if has_value:
                    try:
                        bool_values[name] = parse_bool(value)
                    except ValueError:
                        raise FlagParseError(
                            f'invalid boolean value "{value}" for -{name}: parse error',
                            flag_name=name,
                        ) from None
                else:
                    bool_values[name] = True
                i += 1
            elif has_value:
                out.append(f"--{keys[name]}={value}")
                raw_values[name] = value
                i += 1
            else:
                out.append(f"--{keys[name]}")
                out.extend(tokens[i + 1 : i + 2])
                if i + 1 < len(tokens):
                    raw_values[name] = tokens[i + 1]
                i += 2
        out.extend(tokens[i:])
        return out, bool_values, raw_values

    def _valued_flags(self) -> list[Flag]:
        return [flag for flag in self if flag.kind != FlagKind.BOOL]

    def _click_command(self) -> click.Command:
        params: list[click.Parameter] = [
            click.Option(
                [f"--{_param_name(index)}"],
                type=_CLICK_TYPES[flag.kind],
                default=flag.value,
            )
            for index, flag in enumerate(self._valued_flags())
        ]
        return click.Command(
            self.name or "flags",
            params=params,
            add_help_option=False,
            context_settings={
                "allow_interspersed_args": False,
                "allow_extra_args": True,
                "ignore_unknown_options": False,
                "help_option_names": [],
            },
        )

    def _flag_for_key(self, key: Optional[str]) -> Optional[Flag]:
        """Map a click parameter name or ``--flag_N`` option back to its flag."""
        if key is None:
            return None
        index = key.lstrip("-").removeprefix("flag_")
        if not index.isdigit():
            return None
        flags = self._valued_flags()
        return flags[int(index)] if int(index) < len(flags) else None

    def __repr__(self) -> str:
        return f"FlagSet(name={self.name!r}, flags={sorted(self._flags)!r})"


def _param_name(index: int) -> str:
    return f"flag_{index}"
