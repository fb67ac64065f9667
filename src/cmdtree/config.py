"""Run configuration for the process entry helper.

The command tree itself reads no environment variables. The entry helper
:func:`cmdtree.app.main` does, to decide how loudly to report diagnostics.
Resolution precedence, highest first:

1. Values passed explicitly to :func:`load_run_config`.
2. Environment variables: ``CMDTREE_VERBOSE``, ``CMDTREE_QUIET``,
   ``NO_COLOR`` (any value, even empty, disables colour).
3. Model defaults.
"""

from __future__ import annotations

import os
from typing import Callable, Optional

from pydantic import BaseModel, Field

from cmdtree.models import parse_bool

ENV_VERBOSE = "CMDTREE_VERBOSE"
ENV_QUIET = "CMDTREE_QUIET"
ENV_NO_COLOR = "NO_COLOR"


class RunConfig(BaseModel):
    """How :func:`cmdtree.app.main` reports diagnostics."""

    verbose: bool = Field(default=False, description="Show dispatcher debug traces")
    quiet: bool = Field(default=False, description="Suppress warnings")
    no_color: bool = Field(default=False, description="Never colour diagnostics")


def _env_flag(getenv: Callable[[str], Optional[str]], name: str) -> Optional[bool]:
    raw = getenv(name)
    if raw is None or raw == "":
        return None
    try:
        return parse_bool(raw)
    except ValueError:
        return None


def load_run_config(
    verbose: Optional[bool] = None,
    quiet: Optional[bool] = None,
    no_color: Optional[bool] = None,
    getenv: Callable[[str], Optional[str]] = os.getenv,
) -> RunConfig:
    """Resolve a :class:`RunConfig` from explicit values and the environment.

    Unparseable boolean environment values are ignored.
    """
    if verbose is None:
        verbose = _env_flag(getenv, ENV_VERBOSE)
    if quiet is None:
        quiet = _env_flag(getenv, ENV_QUIET)
    if no_color is None and getenv(ENV_NO_COLOR) is not None:
        no_color = True

    values = {"verbose": verbose, "quiet": quiet, "no_color": no_color}
    return RunConfig(**{k: v for k, v in values.items() if v is not None})
