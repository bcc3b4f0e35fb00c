from rich.table import Table
from orm_adapter_sdk.discovery import discover_adapters
from orm_bigquery_cli.console import console, print_warning

def list_available_adapters() -> None:
    """Discovers and displays all installed connection adapters."""
    adapters = discover_adapters()

    if not adapters:
        print_warning("No adapters found. Please install an adapter package (e.g., orm-bigquery).")
        return

    table = Table(title="Installed Connection Adapters")
    table.add_column("Adapter ID", style="cyan", no_wrap=True)
    table.add_column("Class", style="magenta")

    for name, cls in adapters.items():
        table.add_row(name, f"{cls.__module__}.{cls.__name__}")

    console.print(table)
