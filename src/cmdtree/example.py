"""A small program built with cmdtree.

Registers ``foo`` -> ``bah`` -> ``print`` under a root and runs it. Installed
as the ``cmdtree-example`` console script::

    $ cmdtree-example foo bah print -capitalize hello world
    HELLO WORLD
    $ cmdtree-example help foo
"""

from __future__ import annotations

from typing import IO, Callable, Optional

from cmdtree.accessors import flag_bool
from cmdtree.app import main as run_main
from cmdtree.command import Command, new_root
from cmdtree.exit_codes import EXIT_SUCCESS
from cmdtree.flags import FlagSet
from cmdtree.models import Context


def print_args(
    ctx: Context,
    stdout: IO[str],
    flags: FlagSet,
    getenv: Callable[[str], Optional[str]],
    stdin: IO[str],
    stderr: IO[str],
) -> tuple[int, Optional[BaseException]]:
    """Write the positional arguments to stdout, space separated."""
    words = flags.args()
    if flag_bool(flags, "capitalize"):
        words = [word.upper() for word in words]
    stdout.write(" ".join(words) + "\n")
    return EXIT_SUCCESS, None


def build_root(
    name: Optional[str] = None,
    stdin: Optional[IO[str]] = None,
    stdout: Optional[IO[str]] = None,
    stderr: Optional[IO[str]] = None,
) -> Command:
    """Build the example tree. Arguments are passed on to :func:`new_root`."""
    print_flags = FlagSet("print")
    print_flags.add_bool("capitalize", False, "capitalize output")

    printer = Command(
        name="print",
        handler=print_args,
        short="Print args to stdout",
        usage="[-capitalize] <some text>",
        long="This is the long text",
        flags=print_flags,
    )
    bah = Command(name="bah", short="Nothing else")
    foo = Command(name="foo", short="Nothing")

    bah.register(printer)
    foo.register(bah)
    root = new_root(name=name, stdin=stdin, stdout=stdout, stderr=stderr)
    root.register(foo)
    root.short = "This is the root short description"
    return root


def main() -> None:
    """Console-script entry point."""
    run_main(build_root())
