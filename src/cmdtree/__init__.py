"""cmdtree -- build command-line programs from a tree of subcommands.

Each node of the tree is a :class:`~cmdtree.command.Command` with its own
flags, help text and handler. Running the tree resolves the argument vector
to one node, parsing each level's flags on the way down, and either calls
that node's handler or prints generated help.

Typical use::

    from cmdtree.app import main
    from cmdtree.command import Command, new_root

    root = new_root(short="Manage widgets")
    root.register(Command(name="list", short="List widgets", handler=list_widgets))
    main(root)

Every node also answers ``help [<command>]``.

Modules:
    command: Command nodes, name rules and registration.
    dispatch: The argument-resolution algorithm (``run``/``execute``).
    help: Help-text rendering and the ``help`` pseudo subcommand.
    flags: Per-command flag sets parsed with click.
    accessors: Typed reads of parsed flags for use in handlers.
    models: Pydantic models for flags and the handler context.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: Diagnostic output on stderr with Rich.
    config: Diagnostics settings for the entry helper.
    app: Process entry helper (``main``).
"""

__version__ = "0.1.0"
