"""Command nodes and the registration rules that keep them a tree.

A program builds its command tree once, at startup::

    root = new_root(short="Manage widgets")
    widgets = root.register(Command(name="widgets", short="Widget commands"))
    widgets.register(Command(name="list", short="List widgets", handler=list_widgets))

and then hands it to :func:`cmdtree.dispatch.run` (or
:func:`cmdtree.app.main`).

**Invariants enforced by** :meth:`Command.register`

* Names are non-empty and match ``^[a-z0-9]+(-[a-z0-9]+)*$``: lowercase
  alphanumerics and hyphens, no leading, trailing or doubled hyphen.
* Names are unique among siblings.
* Every non-root node gets exactly one parent, once. A node that already has
  a parent, or that is the target parent or one of its ancestors, cannot be
  registered, so no node is reachable by two paths and there are no cycles.

Violations raise :class:`~cmdtree.exceptions.CommandConfigError`; they are
bugs in the program building the tree and are meant to abort its startup.
"""

from __future__ import annotations

import os
import re
import sys
from types import MappingProxyType
from typing import IO, TYPE_CHECKING, Any, Callable, Mapping, Optional

from cmdtree.exceptions import CommandConfigError

if TYPE_CHECKING:
    from cmdtree.flags import FlagSet
    from cmdtree.models import Context

COMMAND_NAME_PATTERN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")

Handler = Callable[
    ["Context", IO[str], "FlagSet", Callable[[str], Optional[str]], IO[str], IO[str]],
    "tuple[int, Optional[BaseException]]",
]
"""Signature of a command handler.

Called as ``handler(context, stdout, flags, getenv, stdin, stderr)`` and
returns ``(exit_code, error)``; ``error`` is ``None`` on success.
"""


def is_valid_name(name: str) -> bool:
    """Whether *name* is acceptable as a registered command name."""
    return COMMAND_NAME_PATTERN.fullmatch(name) is not None


class Command:
    """A node of the command tree.

    Args:
        name: Name typed by the user to select this command. Required for
            every node except the root.
        handler: Function run when the command is resolved. A node needs a
            handler, children, or both by the time it is executed.
        usage: Syntax of this command's own flags and arguments, e.g.
            ``"[-capitalize] <text>"``. Use ``[]`` for optional parameters
            and ``<>`` for values to be replaced by the user.
        short: One-line description shown in the parent's command listing.
            Required for every node except the root.
        long: Full help text, trimmed of surrounding whitespace when shown.
        flags: Flags recognised by this command. An empty set is used when
            omitted.
    """

    def __init__(
        self,
        name: str = "",
        handler: Optional[Handler] = None,
        usage: str = "",
        short: str = "",
        long: str = "",
        flags: Optional[FlagSet] = None,
    ) -> None:
        self.name = name
        self.handler = handler
        self.usage = usage
        self.short = short
        self.long = long
        self.flags = flags

        self.stdin: Optional[IO[str]] = None
        self.stdout: Optional[IO[str]] = None
        self.stderr: Optional[IO[str]] = None

        self._parent: Optional[Command] = None
        self._children: dict[str, Command] = {}
        self._longest_name = 0

    @property
    def parent(self) -> Optional[Command]:
        """The node this command was registered under, ``None`` for the root."""
        return self._parent

    @property
    def children(self) -> Mapping[str, Command]:
        """Read-only view of the registered children, keyed by name."""
        return MappingProxyType(self._children)

    @property
    def longest_child_name_length(self) -> int:
        """Length of the longest direct child name (0 without children)."""
        return self._longest_name

    def child(self, name: str) -> Optional[Command]:
        return self._children.get(name)

    def path(self) -> list[str]:
        """Names from the root down to this node."""
        names: list[str] = []
        node: Optional[Command] = self
        while node is not None:
            names.append(node.name)
            node = node._parent
        return names[::-1]

    def is_runnable(self) -> bool:
        return self.handler is not None or bool(self._children)

    def register(self, child: Command) -> Command:
        """Register *child* under this command and return it.

        Raises:
            CommandConfigError: If the child has no name or no short
                description, its name is malformed or already taken, it
                already has a parent, or it is this node or an ancestor.
        """
        if not child.name:
            raise CommandConfigError("command name is required")
        if not child.short:
            raise CommandConfigError(
                f"command short string is required: {child.name}", command_name=child.name
            )
        if not is_valid_name(child.name):
            raise CommandConfigError(
                f"invalid command name: {child.name!r}", command_name=child.name
            )
        if child.name in self._children:
            raise CommandConfigError(
                f"command already registered: {child.name}", command_name=child.name
            )
        if child._parent is not None:
            raise CommandConfigError(
                f"command {child.name!r} is already registered under "
                f"{' '.join(child._parent.path())!r}",
                command_name=child.name,
            )
        node: Optional[Command] = self
        while node is not None:
            if node is child:
                raise CommandConfigError(
                    f"command {child.name!r} cannot be registered under its own subtree",
                    command_name=child.name,
                )
            node = node._parent

        child._parent = self
        self._children[child.name] = child
        if len(child.name) > self._longest_name:
            self._longest_name = len(child.name)
        return child

    def execute(self, args: list[str], **kwargs: Any) -> tuple[int, Optional[BaseException]]:
        """Shortcut for :func:`cmdtree.dispatch.execute` on this node."""
        from cmdtree.dispatch import execute

        return execute(self, args, **kwargs)

    def __repr__(self) -> str:
        return f"Command(name={self.name!r}, children={sorted(self._children)!r})"


def register(parent: Command, child: Command) -> Command:
    """Register *child* under *parent*; see :meth:`Command.register`."""
    return parent.register(child)


def program_name(argv0: Optional[str] = None) -> str:
    """Base name of the running program (``sys.argv[0]`` by default)."""
    if argv0 is None:
        argv0 = sys.argv[0] if sys.argv else ""
    return os.path.basename(argv0)


def new_root(
    name: Optional[str] = None,
    short: str = "",
    long: str = "",
    stdin: Optional[IO[str]] = None,
    stdout: Optional[IO[str]] = None,
    stderr: Optional[IO[str]] = None,
) -> Command:
    """Create the root of a command tree.

    The root is named after the running program unless *name* is given, and
    its streams default to the process's standard streams. Every other node
    picks up the root's streams when it is executed, so reassigning
    ``root.stdout`` before running redirects the whole tree.
    """
    root = Command(name=program_name() if name is None else name, short=short, long=long)
    root.stdin = stdin if stdin is not None else sys.stdin
    root.stdout = stdout if stdout is not None else sys.stdout
    root.stderr = stderr if stderr is not None else sys.stderr
    return root
