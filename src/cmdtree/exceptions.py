"""Exception hierarchy for cmdtree.

All exceptions inherit from :class:`CmdtreeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`cmdtree.exit_codes`.

There are two families:

* :class:`UsageError` and its subclasses describe problems with the command
  line a user typed. The dispatcher never raises them; it *returns* them as
  the second half of an ``(exit_code, error)`` pair.
* :class:`InvariantError` and its subclasses describe a malformed command
  tree or a misused API. They are raised immediately and are not meant to be
  caught: the program that built the tree has a bug.

Subclass hierarchy::

    CmdtreeError (exit 1)
    +-- UsageError            (exit 2)
    |   +-- FlagParseError
    |   +-- UnknownCommandError
    |   +-- HelpArgumentsError
    +-- InvariantError        (exit 2)
        +-- CommandConfigError
        +-- FlagDefinitionError
        +-- UndefinedFlagError
"""

from __future__ import annotations

from typing import Optional

from cmdtree.exit_codes import EXIT_FAILURE, EXIT_SERIOUS


class CmdtreeError(Exception):
    """Base exception for all cmdtree errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class UsageError(CmdtreeError):
    """The command line given by the user could not be resolved."""

    exit_code = EXIT_SERIOUS


class FlagParseError(UsageError):
    """A flag was unknown, lacked its value, or had a value of the wrong type.

    Args:
        message: The parser's description of the problem.
        flag_name: Name of the offending flag, without dashes.
    """

    def __init__(self, message: str, flag_name: Optional[str] = None):
        super().__init__(message)
        self.flag_name = flag_name


class UnknownCommandError(UsageError):
    """``help <name>`` was given a name that is not a child of the node."""

    def __init__(self, command_name: str):
        super().__init__(f"unknown command: {command_name}")
        self.command_name = command_name


class HelpArgumentsError(UsageError):
    """``help`` was given more than one command name."""

    def __init__(self) -> None:
        super().__init__("can only give help with one command")


class InvariantError(CmdtreeError):
    """The program using cmdtree violated one of its contracts."""

    exit_code = EXIT_SERIOUS


class CommandConfigError(InvariantError):
    """A command failed validation at registration or execution time.

    Args:
        message: What is wrong with the command.
        command_name: Name of the offending command, when it has one.
    """

    def __init__(self, message: str, command_name: Optional[str] = None):
        super().__init__(message)
        self.command_name = command_name


class FlagDefinitionError(InvariantError):
    """A flag was defined twice or with an invalid name."""


class UndefinedFlagError(InvariantError):
    """A flag accessor was asked for a flag the flag set does not define."""

    def __init__(self, flag_name: str):
        super().__init__(f"flag not defined: {flag_name}")
        self.flag_name = flag_name
