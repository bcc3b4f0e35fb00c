from rich.console import Console
from rich.theme import Theme

theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
})

console = Console(theme=theme)
# Diagnostics go to stderr so `schema-dump` can stream YAML on stdout.
err_console = Console(theme=theme, stderr=True)


def print_success(message: str) -> None:
    console.print(f"[success]✔ {message}[/success]")


def print_warning(message: str) -> None:
    err_console.print(f"[warning]! {message}[/warning]")


def print_error(message: str) -> None:
    err_console.print(f"[error]✘ {message}[/error]")
