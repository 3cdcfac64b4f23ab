"""giglio.frontend._rich -- Rich-based frontend.

Coloured, structured output for interactive terminals.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.theme import Theme

from giglio.domain.models import FunctionEntry, Module, ParameterSet
from giglio.frontend._plain import describe_timing, format_parameters

_THEME = Theme(
    {
        "module": "bold",
        "params": "cyan",
        "name": "bold cyan",
        "success": "bold green",
        "timing": "default",
        "failure": "bold red",
        "error": "bold red",
        "dim": "dim",
    }
)


class RichFrontend:
    """Frontend implementation backed by Rich."""

    requires_output = True

    def __init__(self, console: Console | None = None) -> None:
        self._con = console or Console(theme=_THEME, highlight=False)
        if console is not None:
            self._con.push_theme(_THEME)

    # -- Module lifecycle ---------------------------------------------------

    def module_start(self, module: Module) -> None:
        self._con.print(Rule(f" Benchmarking {escape(module.name)} ", style="module", align="left"))

    def module_end(self, module: Module) -> None:
        self._con.print()

    def parameter_set_start(self, module: Module, parameter_set: ParameterSet) -> None:
        self._con.print(f"  [params]\\[{escape(format_parameters(parameter_set))}][/]")

    # -- Function results ---------------------------------------------------

    def function_start(self, module: Module, entry: FunctionEntry, reps: int) -> None:
        # Runs inside the timed region.
        pass

    def function_success(
        self, module: Module, entry: FunctionEntry, time_ms: float | None, reps: int
    ) -> None:
        self._con.print(
            f"  [success]✓[/] [name]{escape(entry.name)}[/] "
            f"[timing]{escape(describe_timing(time_ms, reps))}[/]"
        )

    def function_failure(
        self, module: Module, entry: FunctionEntry, exception: Exception
    ) -> None:
        self._con.print(
            f"  [failure]✗ {escape(entry.name)}[/] "
            f"[dim]{type(exception).__name__}: {escape(str(exception))}[/]"
        )

    def error(self, module: Module, entry: FunctionEntry, exception: Exception) -> None:
        self._con.print(
            f"  [error]✗ {escape(module.name)}/{escape(entry.name)} "
            f"{type(exception).__name__}: {escape(str(exception))}[/]"
        )
