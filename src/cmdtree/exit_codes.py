"""Numeric exit codes returned by command execution.

The dispatcher itself only ever produces :data:`EXIT_SUCCESS` or
:data:`EXIT_SERIOUS`; :data:`EXIT_FAILURE` is reserved for handlers that want
to report a business-level failure. The embedding program translates the
returned code into the actual process status.

Example::

    $ prog help nosuch
    $ echo $?
    2   # EXIT_SERIOUS -- the help target does not exist
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_FAILURE = 1
"""A handler reported a failure."""

EXIT_SERIOUS = 2
"""The command line could not be parsed or resolved (usage error)."""

EXIT_INTERRUPTED = 130
"""The process was interrupted with Ctrl-C."""
