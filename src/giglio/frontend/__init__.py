"""giglio.frontend -- reporting sinks for benchmark runs.

Usage::

    from giglio.frontend import create_frontend

    frontend = create_frontend("auto")  # "rich" | "plain" | "quiet" | "auto"
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from giglio.domain.models import GiglioError
from giglio.frontend._plain import PlainFrontend, format_duration
from giglio.frontend._summary import SummaryFrontend

if TYPE_CHECKING:
    from giglio.domain.protocols import Frontend

__all__ = ["FRONTENDS", "PlainFrontend", "SummaryFrontend", "create_frontend", "format_duration"]

FRONTENDS = ("auto", "plain", "quiet", "rich")


def create_frontend(name: str = "auto") -> Frontend:
    """Build a frontend by name.

    Args:
        name: ``"rich"`` -- always use Rich.
              ``"plain"`` -- print() based output with timings.
              ``"quiet"`` -- headings and failures only; needs no timer output.
              ``"auto"`` (default) -- Rich when stdout is a TTY, plain otherwise.
    """
    if name == "auto":
        name = "rich" if sys.stdout.isatty() else "plain"

    if name == "plain":
        return PlainFrontend()
    if name == "quiet":
        return PlainFrontend(show_timings=False)
    if name == "rich":
        from giglio.frontend._rich import RichFrontend

        return RichFrontend()
    raise GiglioError(f"Unknown frontend {name!r} (choose from {', '.join(FRONTENDS)})")
