"""benchdiff.console._protocol -- ConsoleProtocol definition.

Pure standard-library typing.Protocol for the benchdiff terminal output system.
No external dependencies allowed in this file.
"""

from __future__ import annotations

from typing import Protocol


class ConsoleProtocol(Protocol):
    """benchdiff terminal output protocol.

    **General messages** -- usable from any module::

        console.info("Found 3 contracts")
        console.success("Report written")
        console.warning("No result pairs found")
        console.error("Cannot write report")

    **Structured output** -- tables and key-value displays::

        console.table(["Contract", "Status"], [["token", "compared"]], title="Units")
        console.kv({"Threshold": "2.5%", "Compared": "3/3"})

    **Progress** -- used by the CLI commands::

        console.step(1, 3, "Discovering contracts...")
        console.step_detail("token")
    """

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        """Informational message."""
        ...

    def success(self, message: str) -> None:
        """Success / positive-outcome message."""
        ...

    def warning(self, message: str) -> None:
        """Warning message."""
        ...

    def error(self, message: str) -> None:
        """Error message."""
        ...

    # -- Structured output --------------------------------------------------

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        """Display a table with *headers* and *rows*."""
        ...

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        """Display key-value pairs."""
        ...

    # -- Progress -----------------------------------------------------------

    def step(self, current: int, total: int, description: str) -> None:
        """Display a pipeline step indicator ``[current/total] description``."""
        ...

    def step_detail(self, message: str) -> None:
        """Display an indented detail line under the current step."""
        ...
