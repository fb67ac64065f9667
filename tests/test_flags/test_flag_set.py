"""Tests for cmdtree.flags.

Covers:
- Flag definition, redefinition and invalid names
- Single and double dash syntax, -name=value and -name value
- Bool switches and explicit bool values (last occurrence wins)
- Scan termination at positionals, a lone '-', and '--'
- Error messages for unknown flags, missing values, bad values, bad syntax
- -h / -help handling with and without a defined flag of that name
- visit / visit_all / set / args / narg / arg
"""

from __future__ import annotations

from io import StringIO

import pytest

from cmdtree.exceptions import FlagDefinitionError, FlagParseError
from cmdtree.flags import FlagHelpRequested, FlagSet
from cmdtree.models import FlagKind


@pytest.fixture
def flags() -> FlagSet:
    fs = FlagSet("test")
    fs.add_bool("v", False, "verbose")
    fs.add_int("n", 1, "count")
    fs.add_string("name", "", "who")
    fs.add_float("ratio", 0.5, "how much")
    return fs


# ------------------------------------------------------------------ #
# Definition
# ------------------------------------------------------------------ #


class TestDefinition:
    def test_add_returns_flag(self) -> None:
        fs = FlagSet("x")
        flag = fs.add_int("count", 3, "how many")
        assert flag.kind == FlagKind.INT
        assert flag.default == 3
        assert flag.value == 3
        assert fs.lookup("count") is flag

    def test_lookup_missing(self) -> None:
        assert FlagSet("x").lookup("nope") is None

    def test_redefinition_rejected(self) -> None:
        fs = FlagSet("x")
        fs.add_bool("v")
        with pytest.raises(FlagDefinitionError, match="x flag redefined: v"):
            fs.add_string("v")

    @pytest.mark.parametrize("name", ["", "-v", "a=b"])
    def test_invalid_names_rejected(self, name: str) -> None:
        with pytest.raises(FlagDefinitionError, match="invalid name"):
            FlagSet("x").add_bool(name)

    @pytest.mark.parametrize("default", ["abc", "1.5", "0x"])
    def test_invalid_int_default_rejected(self, default: str) -> None:
        with pytest.raises(FlagDefinitionError, match="invalid default") as exc_info:
            FlagSet("x").add_int("n", default)  # type: ignore[arg-type]
        assert exc_info.value.exit_code == 2

    def test_invalid_bool_default_rejected(self) -> None:
        fs = FlagSet("x")
        with pytest.raises(FlagDefinitionError, match="invalid default 'maybe' for flag v"):
            fs.add_bool("v", "maybe")  # type: ignore[arg-type]
        assert fs.lookup("v") is None

    def test_iteration_is_sorted(self, flags: FlagSet) -> None:
        assert [f.name for f in flags] == ["n", "name", "ratio", "v"]
        assert len(flags) == 4

    def test_not_parsed_initially(self, flags: FlagSet) -> None:
        assert flags.parsed is False
        assert flags.args() == []


# ------------------------------------------------------------------ #
# Parsing
# ------------------------------------------------------------------ #


class TestParseSyntax:
    @pytest.mark.parametrize(
        "tokens",
        [
            ["-n=5"],
            ["--n=5"],
            ["-n", "5"],
            ["--n", "5"],
        ],
    )
    def test_one_letter_valued_flag_forms(self, flags: FlagSet, tokens) -> None:
        flags.parse(tokens)
        assert flags.lookup("n").value == 5
        assert flags.lookup("n").actual is True

    @pytest.mark.parametrize("tokens", [["-name=ann"], ["--name=ann"], ["-name", "ann"]])
    def test_long_valued_flag_forms(self, flags: FlagSet, tokens) -> None:
        flags.parse(tokens)
        assert flags.lookup("name").value == "ann"

    def test_value_may_contain_equals(self, flags: FlagSet) -> None:
        flags.parse(["-name=a=b"])
        assert flags.lookup("name").value == "a=b"

    def test_value_may_start_with_dash(self, flags: FlagSet) -> None:
        flags.parse(["-n", "-5"])
        assert flags.lookup("n").value == -5

    @pytest.mark.parametrize("text,expected", [("0x10", 16), ("017", 15), ("0b11", 3), ("1_000", 1000)])
    def test_int_base_prefixes(self, flags: FlagSet, text: str, expected: int) -> None:
        flags.parse([f"-n={text}"])
        assert flags.lookup("n").value == expected

    def test_int_out_of_range(self, flags: FlagSet) -> None:
        with pytest.raises(FlagParseError) as exc_info:
            flags.parse(["-n=9223372036854775808"])
        assert str(exc_info.value) == (
            'invalid value "9223372036854775808" for flag -n: value out of range'
        )

    def test_float_value(self, flags: FlagSet) -> None:
        flags.parse(["-ratio=2.25"])
        assert flags.lookup("ratio").value == 2.25

    def test_empty_string_value(self, flags: FlagSet) -> None:
        flags.parse(["-name="])
        assert flags.lookup("name").value == ""
        assert flags.lookup("name").actual is True

    def test_unset_flags_keep_defaults(self, flags: FlagSet) -> None:
        flags.parse(["-v"])
        assert flags.lookup("n").value == 1
        assert flags.lookup("n").actual is False
        assert flags.lookup("ratio").value == 0.5


class TestParseBool:
    def test_switch(self, flags: FlagSet) -> None:
        flags.parse(["-v"])
        assert flags.lookup("v").value is True

    @pytest.mark.parametrize("text,expected", [("true", True), ("1", True), ("F", False), ("false", False)])
    def test_explicit_value(self, flags: FlagSet, text: str, expected: bool) -> None:
        flags.parse([f"-v={text}"])
        assert flags.lookup("v").value is expected
        assert flags.lookup("v").actual is True

    def test_last_occurrence_wins(self, flags: FlagSet) -> None:
        flags.parse(["-v", "-v=false"])
        assert flags.lookup("v").value is False

    def test_last_occurrence_wins_other_order(self, flags: FlagSet) -> None:
        flags.parse(["-v=false", "-v"])
        assert flags.lookup("v").value is True

    def test_switch_does_not_take_next_token(self, flags: FlagSet) -> None:
        flags.parse(["-v", "false"])
        assert flags.lookup("v").value is True
        assert flags.args() == ["false"]

    def test_default_true_can_be_cleared(self) -> None:
        fs = FlagSet("x")
        fs.add_bool("color", True, "use colour")
        fs.parse(["-color=false"])
        assert fs.lookup("color").value is False

    def test_bools_mixed_with_valued_flags(self, flags: FlagSet) -> None:
        flags.parse(["-v", "-n", "7", "--v=false", "-name=z", "rest"])
        assert flags.lookup("v").value is False
        assert flags.lookup("n").value == 7
        assert flags.lookup("name").value == "z"
        assert flags.args() == ["rest"]


class TestParseTermination:
    def test_stops_at_first_positional(self, flags: FlagSet) -> None:
        flags.parse(["-v", "pos", "-n", "3"])
        assert flags.args() == ["pos", "-n", "3"]
        assert flags.lookup("n").actual is False

    def test_double_dash_consumed(self, flags: FlagSet) -> None:
        flags.parse(["-v", "--", "-n", "3"])
        assert flags.args() == ["-n", "3"]

    def test_lone_dash_is_positional(self, flags: FlagSet) -> None:
        flags.parse(["-", "x"])
        assert flags.args() == ["-", "x"]

    def test_no_tokens(self, flags: FlagSet) -> None:
        flags.parse([])
        assert flags.parsed is True
        assert flags.args() == []
        assert flags.narg() == 0

    def test_args_accessors(self, flags: FlagSet) -> None:
        flags.parse(["a", "b"])
        assert flags.narg() == 2
        assert flags.arg(0) == "a"
        assert flags.arg(1) == "b"
        assert flags.arg(2) == ""
        assert flags.arg(-1) == ""

    def test_args_returns_copy(self, flags: FlagSet) -> None:
        flags.parse(["a"])
        flags.args().append("b")
        assert flags.args() == ["a"]

    def test_reparse_resets_actual(self, flags: FlagSet) -> None:
        flags.parse(["-n", "4"])
        flags.parse([])
        assert flags.lookup("n").actual is False
        assert flags.lookup("n").value == 4


# ------------------------------------------------------------------ #
# Errors
# ------------------------------------------------------------------ #


class TestParseErrors:
    def _capture(self, fs: FlagSet) -> tuple[StringIO, list[str]]:
        out = StringIO()
        usage_calls: list[str] = []
        fs.output = out
        fs.usage = lambda: usage_calls.append("usage")
        return out, usage_calls

    def test_unknown_flag(self, flags: FlagSet) -> None:
        out, usage_calls = self._capture(flags)
        with pytest.raises(FlagParseError) as exc_info:
            flags.parse(["-v", "--nope=1"])
        assert str(exc_info.value) == "flag provided but not defined: -nope"
        assert exc_info.value.flag_name == "nope"
        assert out.getvalue() == "flag provided but not defined: -nope\n"
        assert usage_calls == ["usage"]

    def test_combined_short_flags_not_supported(self, flags: FlagSet) -> None:
        self._capture(flags)
        with pytest.raises(FlagParseError, match="not defined: -vn"):
            flags.parse(["-vn"])

    def test_missing_value(self, flags: FlagSet) -> None:
        out, usage_calls = self._capture(flags)
        with pytest.raises(FlagParseError) as exc_info:
            flags.parse(["-n"])
        assert str(exc_info.value) == "flag needs an argument: -n"
        assert usage_calls == ["usage"]

    def test_bad_int(self, flags: FlagSet) -> None:
        self._capture(flags)
        with pytest.raises(FlagParseError) as exc_info:
            flags.parse(["-n=many"])
        assert str(exc_info.value) == 'invalid value "many" for flag -n: parse error'
        assert exc_info.value.flag_name == "n"

    def test_bad_float(self, flags: FlagSet) -> None:
        self._capture(flags)
        with pytest.raises(FlagParseError) as exc_info:
            flags.parse(["-ratio", "lots"])
        assert str(exc_info.value) == 'invalid value "lots" for flag -ratio: parse error'

    def test_float_digit_separators_rejected(self, flags: FlagSet) -> None:
        self._capture(flags)
        with pytest.raises(FlagParseError, match='invalid value "1_0" for flag -ratio'):
            flags.parse(["-ratio=1_0"])
        assert flags.lookup("ratio").value == 0.5

    def test_last_bad_value_is_reported(self, flags: FlagSet) -> None:
        self._capture(flags)
        with pytest.raises(FlagParseError, match='invalid value "x" for flag -n'):
            flags.parse(["-n=1", "-n", "x"])

    def test_bad_bool(self, flags: FlagSet) -> None:
        self._capture(flags)
        with pytest.raises(FlagParseError, match='invalid boolean value "maybe" for -v'):
            flags.parse(["-v=maybe"])

    @pytest.mark.parametrize("token", ["---v", "-=x", "--=x"])
    def test_bad_syntax(self, flags: FlagSet, token: str) -> None:
        self._capture(flags)
        with pytest.raises(FlagParseError, match="bad flag syntax"):
            flags.parse([token])

    def test_no_output_stream(self, flags: FlagSet) -> None:
        with pytest.raises(FlagParseError):
            flags.parse(["-nope"])


class TestHelpFlags:
    @pytest.mark.parametrize("token", ["-h", "-help", "--help", "--h"])
    def test_help_requested(self, flags: FlagSet, token: str) -> None:
        out = StringIO()
        usage_calls: list[str] = []
        flags.output = out
        flags.usage = lambda: usage_calls.append("usage")
        with pytest.raises(FlagHelpRequested):
            flags.parse([token])
        assert usage_calls == ["usage"]
        assert out.getvalue() == ""

    def test_defined_h_flag_is_a_normal_flag(self) -> None:
        fs = FlagSet("x")
        fs.add_string("h", "", "host")
        fs.parse(["-h", "example.org"])
        assert fs.lookup("h").value == "example.org"

    def test_help_after_positional_is_positional(self, flags: FlagSet) -> None:
        flags.parse(["cmd", "-h"])
        assert flags.args() == ["cmd", "-h"]


# ------------------------------------------------------------------ #
# Visiting and setting
# ------------------------------------------------------------------ #


class TestVisitAndSet:
    def test_visit_all_sorted(self, flags: FlagSet) -> None:
        seen: list[str] = []
        flags.visit_all(lambda f: seen.append(f.name))
        assert seen == ["n", "name", "ratio", "v"]

    def test_visit_only_set_flags(self, flags: FlagSet) -> None:
        flags.parse(["-v", "-name=x"])
        seen: list[str] = []
        flags.visit(lambda f: seen.append(f.name))
        assert seen == ["name", "v"]

    def test_set(self, flags: FlagSet) -> None:
        flags.set("n", "0x10")
        assert flags.lookup("n").value == 16
        assert flags.lookup("n").actual is True

    def test_set_unknown(self, flags: FlagSet) -> None:
        with pytest.raises(FlagParseError, match="no such flag -zzz"):
            flags.set("zzz", "1")

    def test_set_invalid(self, flags: FlagSet) -> None:
        with pytest.raises(FlagParseError) as exc_info:
            flags.set("n", "abc")
        assert str(exc_info.value) == 'invalid value "abc" for flag -n: parse error'

    def test_set_float_digit_separators_rejected(self, flags: FlagSet) -> None:
        with pytest.raises(FlagParseError, match="parse error"):
            flags.set("ratio", "1_0")


class TestUnusualNames:
    """Flag names are passed through verbatim, whatever characters they hold."""

    @pytest.mark.parametrize("name", ["in/out", "/path", "a;b", "flag_0", "x.y"])
    def test_valued_flag(self, name: str) -> None:
        fs = FlagSet("x")
        fs.add_int("flag_1", 0, "decoy")
        fs.add_string(name, "", "path")
        fs.parse([f"-{name}=a", "rest"])
        assert fs.lookup(name).value == "a"
        assert fs.lookup("flag_1").actual is False
        assert fs.args() == ["rest"]

    def test_parse_without_tokens(self) -> None:
        fs = FlagSet("x")
        fs.add_string("in/out", "", "path")
        fs.parse([])
        assert fs.lookup("in/out").value == ""

    def test_missing_value_names_the_flag(self) -> None:
        fs = FlagSet("x")
        fs.add_string("in/out", "", "path")
        with pytest.raises(FlagParseError) as exc_info:
            fs.parse(["--in/out"])
        assert str(exc_info.value) == "flag needs an argument: -in/out"
        assert exc_info.value.flag_name == "in/out"

    def test_bad_value_names_the_flag(self) -> None:
        fs = FlagSet("x")
        fs.add_float("a/b", 0.0, "ratio")
        with pytest.raises(FlagParseError) as exc_info:
            fs.parse(["-a/b", "many"])
        assert str(exc_info.value) == 'invalid value "many" for flag -a/b: parse error'

    def test_internal_option_names_are_not_accepted(self) -> None:
        fs = FlagSet("x")
        fs.add_string("name", "", "who")
        with pytest.raises(FlagParseError, match="not defined: -flag_0"):
            fs.parse(["--flag_0=x"])
