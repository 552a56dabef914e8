"""Terminal prompter for the interactive session."""

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from dnschanger.cli.session import Prompter


class RichPrompter(Prompter):
    """Numbered menus and prompts rendered with rich."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def choose(self, prompt: str, options: list[str], default: int = 0) -> int:
        self.console.print(f"\n[bold]{prompt}[/]")
        for i, option in enumerate(options, start=1):
            self.console.print(f"  [cyan]{i}[/]) {option}", highlight=False)

        choice = IntPrompt.ask(
            "Choice",
            console=self.console,
            choices=[str(i) for i in range(1, len(options) + 1)],
            default=default + 1,
            show_choices=False,
        )
        return choice - 1

    def ask(self, prompt: str, default: str = "") -> str:
        return Prompt.ask(prompt, console=self.console, default=default).strip()

    def confirm(self, prompt: str, default: bool = True) -> bool:
        return Confirm.ask(prompt, console=self.console, default=default)

    def show(self, message: str, style: str | None = None) -> None:
        self.console.print(message, style=style, markup=False, highlight=False)
