"""Arrow-key choice prompt — implements the ChoicePrompt port on a terminal."""

from __future__ import annotations

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from prompt_charter.domain.exceptions import SelectionCancelledError


def get_key() -> str:
    """Get a single keypress in a cross-platform way using readchar."""
    key = readchar.readkey()

    if key == readchar.key.UP:
        return "up"
    if key == readchar.key.DOWN:
        return "down"
    if key in (readchar.key.ENTER, "\n", "\r"):
        return "enter"
    if key == readchar.key.ESC:
        return "escape"
    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt

    return key


class ArrowKeyPrompt:
    """Single selection with ↑/↓ and Enter, rendered in a Rich live panel."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def select(self, message: str, choices: list[str]) -> str:
        if not choices:
            raise ValueError("select() needs at least one choice")

        selected_index = 0

        def render() -> Panel:
            table = Table.grid(padding=(0, 2))
            table.add_column(style="cyan", justify="left", width=3)
            table.add_column(style="white", justify="left")

            for i, choice in enumerate(choices):
                marker = "▶" if i == selected_index else " "
                table.add_row(marker, f"[cyan]{choice}[/cyan]")

            table.add_row("", "")
            table.add_row("", "[dim]Use ↑/↓ to navigate, Enter to select, Esc to cancel[/dim]")

            return Panel(
                table,
                title=f"[bold]{message}[/bold]",
                border_style="cyan",
                padding=(1, 2),
            )

        self._console.print()
        with Live(render(), console=self._console, transient=True, auto_refresh=False) as live:
            while True:
                try:
                    key = get_key()
                except KeyboardInterrupt as exc:
                    raise SelectionCancelledError() from exc

                if key == "up":
                    selected_index = (selected_index - 1) % len(choices)
                elif key == "down":
                    selected_index = (selected_index + 1) % len(choices)
                elif key == "enter":
                    break
                elif key == "escape":
                    raise SelectionCancelledError()

                live.update(render(), refresh=True)

        choice = choices[selected_index]
        self._console.print(f"[cyan]?[/cyan] {message} [bold]{choice}[/bold]")
        return choice
