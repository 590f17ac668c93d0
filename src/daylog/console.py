"""User facing output"""

from rich.console import Console

console = Console()


class ConsoleLogger:
    """Prints session messages with rich markup"""

    def __init__(self, out: Console = None):
        self.console = out or console

    def info(self, message: str):
        self.console.print(f"[green]✓ {message}[/green]")

    def error(self, message: str):
        self.console.print(f"[red]✗ {message}[/red]")
