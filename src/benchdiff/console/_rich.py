"""benchdiff.console._rich -- Rich-based terminal backend.

Provides coloured, structured terminal output using the Rich library.
"""

from __future__ import annotations

from typing import IO

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "info": "blue",
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "step.num": "bold cyan",
        "dim": "dim",
    }
)


class RichBackend:
    """ConsoleProtocol implementation backed by Rich."""

    def __init__(self, file: IO[str] | None = None) -> None:
        self._con = Console(theme=_THEME, highlight=False, file=file)

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        self._con.print(f"  {escape(message)}", style="info")

    def success(self, message: str) -> None:
        self._con.print(f"  \u2713 {escape(message)}", style="success")

    def warning(self, message: str) -> None:
        self._con.print(f"  \u26a0 {escape(message)}", style="warning")

    def error(self, message: str) -> None:
        self._con.print(f"  \u2717 {escape(message)}", style="error")

    # -- Structured output --------------------------------------------------

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        t = Table(title=title or None, box=box.SIMPLE, show_edge=False, pad_edge=True)
        for h in headers:
            t.add_column(h)
        for r in rows:
            t.add_row(*(escape(c) for c in r))
        self._con.print(t)

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        t = Table(
            title=title or None,
            box=box.SIMPLE,
            show_header=False,
            show_edge=False,
            pad_edge=True,
        )
        t.add_column("Key", style="bold", justify="right")
        t.add_column("Value")
        for k, v in data.items():
            t.add_row(k, escape(v))
        self._con.print(t)

    # -- Progress -----------------------------------------------------------

    def step(self, current: int, total: int, description: str) -> None:
        self._con.print(f"\n  [step.num]\\[{current}/{total}][/] {escape(description)}")

    def step_detail(self, message: str) -> None:
        self._con.print(f"    [dim]{escape(message)}[/]")
