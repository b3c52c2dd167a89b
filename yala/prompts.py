"""Interactive prompts.

Commands talk to the user only through the ``Prompter`` protocol so tests can
script the answers. ``RichPrompter`` is the terminal implementation built on
``rich.prompt``. Validators are plain callables that raise
``ValidationError``; the prompter prints the message and asks again.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Optional, Protocol

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from yala.errors import ValidationError
from yala.utils import console as default_console

Validator = Callable[[str], object]


class Prompter(Protocol):
    def confirm(self, message: str, default: bool = False) -> bool: ...

    def select(self, message: str, choices: Sequence[str]) -> str: ...

    def text(
        self,
        message: str,
        validate: Optional[Validator] = None,
        default: Optional[str] = None,
        password: bool = False,
    ) -> str: ...


class RichPrompter:
    """``Prompter`` backed by ``rich.prompt``."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def confirm(self, message: str, default: bool = False) -> bool:
        return Confirm.ask(message, default=default, console=self.console)

    def select(self, message: str, choices: Sequence[str]) -> str:
        if not choices:
            raise ValueError("select() needs at least one choice")
        self.console.print(f"[bold]{message}[/bold]")
        for index, choice in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{index}[/cyan]) {choice}")
        while True:
            picked = IntPrompt.ask("Choice", default=1, console=self.console)
            if 1 <= picked <= len(choices):
                return choices[picked - 1]
            self.console.print(f"[red]Pick a number between 1 and {len(choices)}[/red]")

    def text(
        self,
        message: str,
        validate: Optional[Validator] = None,
        default: Optional[str] = None,
        password: bool = False,
    ) -> str:
        while True:
            if default is None:
                value = Prompt.ask(message, password=password, console=self.console)
            else:
                value = Prompt.ask(
                    message, default=default, password=password, console=self.console
                )
            value = value.strip()
            if validate is None:
                return value
            try:
                validate(value)
            except ValidationError as exc:
                self.console.print(f"[red]{exc}[/red]")
                continue
            return value
