"""Pydantic models shared across cmdtree.

Every module imports its data shapes from here:

* :class:`FlagKind` and :class:`Flag` -- one typed option of a
  :class:`~cmdtree.flags.FlagSet`. A flag knows how to convert command-line
  text into its typed value (:meth:`Flag.set`), how to render its value back
  to text (:meth:`Flag.value_string`), and whether its default is the zero
  value of its kind (:meth:`Flag.is_zero`), which the help renderer uses to
  decide on a ``(default ...)`` suffix.
* :class:`Context` -- the opaque value handed to every handler.

The module-level converters (:func:`parse_bool`, :func:`parse_int`,
:func:`parse_float`, :func:`format_value`) are shared with
:mod:`cmdtree.accessors`.
"""

from __future__ import annotations

import enum
import math
import re
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

# Leading-zero integers are octal ("017" == 15).
_LEGACY_OCTAL = re.compile(r"[+-]?0[0-7_]+")


# --- Value conversion ---


def parse_bool(text: str) -> bool:
    """Parse *text* as a boolean.

    Accepts ``1 t T TRUE true True`` and ``0 f F FALSE false False``.

    Raises:
        ValueError: For any other string.
    """
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"invalid syntax: {text!r}")


def parse_int(text: str) -> int:
    """Parse *text* as a signed 64-bit integer.

    The base is taken from the prefix: ``0x`` hexadecimal, ``0o`` or a bare
    leading ``0`` octal, ``0b`` binary, decimal otherwise. Underscores may
    separate digits.

    Raises:
        ValueError: On a syntax error or when the value overflows 64 bits.
    """
    if text != text.strip():
        raise ValueError(f"invalid syntax: {text!r}")
    if _LEGACY_OCTAL.fullmatch(text):
        value = int(text, 8)
    else:
        value = int(text, 0)
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


def parse_float(text: str) -> float:
    """Parse *text* as a float. Raises :class:`ValueError` on failure.

    Digit separators are not accepted: ``1_0`` is an error, not ``10.0``.
    """
    if text != text.strip() or "_" in text:
        raise ValueError(f"invalid syntax: {text!r}")
    return float(text)


def format_float(value: float) -> str:
    """Render *value* with the shortest digits that round-trip.

    Exponent notation is used when the decimal exponent is below -4 or at
    least 6, so ``1e6`` renders as ``1e+06`` and ``0.5`` as ``0.5``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign, digit_tuple, exponent = Decimal(repr(float(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    prefix = "-" if sign else ""
    point = len(digits) + exponent
    exp10 = point - 1

    if exp10 < -4 or exp10 >= 6:
        mantissa = digits[0]
        if len(digits) > 1:
            mantissa += "." + digits[1:]
        exp_sign = "+" if exp10 >= 0 else "-"
        return f"{prefix}{mantissa}e{exp_sign}{abs(exp10):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{prefix}{digits}{'0' * (point - len(digits))}"
    return f"{prefix}{digits[:point]}.{digits[point:]}"


# --- Flags ---


class FlagKind(str, enum.Enum):
    """The value types a flag can hold."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"


_ZERO_VALUES: dict[FlagKind, Any] = {
    FlagKind.STRING: "",
    FlagKind.BOOL: False,
    FlagKind.INT: 0,
    FlagKind.FLOAT: 0.0,
}

_PARSERS = {
    FlagKind.STRING: str,
    FlagKind.BOOL: parse_bool,
    FlagKind.INT: parse_int,
    FlagKind.FLOAT: parse_float,
}


def parse_value(kind: FlagKind, text: str) -> Any:
    """Convert command-line *text* into a value of *kind*.

    Raises:
        ValueError: If *text* is not a valid literal for *kind*.
    """
    return _PARSERS[kind](text)


def format_value(kind: FlagKind, value: Any) -> str:
    """Render a typed flag value as command-line text."""
    if kind == FlagKind.BOOL:
        return "true" if value else "false"
    if kind == FlagKind.FLOAT:
        return format_float(float(value))
    return str(value)


def zero_value(kind: FlagKind) -> Any:
    """Return the zero value for *kind* (``""``, ``False``, ``0`` or ``0.0``)."""
    return _ZERO_VALUES[kind]


def _coerce(kind: FlagKind, value: Any) -> Any:
    if value is None:
        return zero_value(kind)
    if isinstance(value, str) and kind != FlagKind.STRING:
        return parse_value(kind, value)
    if kind == FlagKind.BOOL:
        return bool(value)
    if kind == FlagKind.INT:
        return int(value)
    if kind == FlagKind.FLOAT:
        return float(value)
    return str(value)


class Flag(BaseModel):
    """A single named, typed option of a flag set.

    ``default`` is fixed at definition time; ``value`` starts out equal to it
    and is replaced when the flag appears on the command line, at which point
    ``actual`` becomes ``True``.

    Example::

        Flag(name="count", kind=FlagKind.INT, default=3, usage="how many `times`")
    """

    name: str
    kind: FlagKind
    usage: str = ""
    default: Any = None
    value: Any = None
    actual: bool = False

    @model_validator(mode="after")
    def _fill_values(self) -> Flag:
        self.default = _coerce(self.kind, self.default)
        self.value = self.default if self.value is None else _coerce(self.kind, self.value)
        return self

    @property
    def def_value(self) -> str:
        """The default value rendered as command-line text."""
        return format_value(self.kind, self.default)

    def value_string(self) -> str:
        """The current value rendered as command-line text."""
        return format_value(self.kind, self.value)

    def is_zero(self) -> bool:
        """Whether the default is the zero value of the flag's kind."""
        return self.def_value == format_value(self.kind, zero_value(self.kind))

    def set(self, text: str) -> None:
        """Parse *text* into the flag's value and mark the flag as set.

        Raises:
            ValueError: If *text* is not a valid literal for the flag's kind.
        """
        self.value = parse_value(self.kind, text)
        self.actual = True


# --- Execution context ---


class Context(BaseModel):
    """Opaque value passed through to every handler.

    cmdtree never sets deadlines or inspects ``values``; both are there for
    the embedding program. ``path`` holds the command names from the root to
    the node whose handler is running.
    """

    model_config = ConfigDict(frozen=True)

    path: tuple[str, ...] = ()
    values: dict[str, Any] = Field(default_factory=dict)

    def with_path(self, path: list[str] | tuple[str, ...]) -> Context:
        """Return a copy of this context positioned at *path*."""
        return self.model_copy(update={"path": tuple(path)})


def background() -> Context:
    """Return an empty :class:`Context`."""
    return Context()
