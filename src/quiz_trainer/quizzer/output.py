"""Rich rendering for command results."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.text import Text, TextType


class QuizOutput:
    """Line-oriented output with an emphasized banner mode."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def log(self, message: TextType, style: str | None = None) -> None:
        if isinstance(message, str):
            message = Text(message)
        self.console.print(message, style=style, highlight=False)

    def error(self, message: str) -> None:
        self.console.print(Text(f"Error: {message}", style="bold red"))

    def banner(self, message: str, style: str = "magenta") -> None:
        self.console.print(
            Panel(
                Text(message, style=f"bold {style}", justify="center"),
                border_style=style,
                expand=False,
                padding=(1, 4),
            )
        )
