from google.api_core.exceptions import GoogleAPICallError
from google.auth.exceptions import GoogleAuthError
from rich.panel import Panel
from rich.table import Table

from orm_adapter_sdk import AdapterCapability, AdapterError
from orm_bigquery.settings import connection_from_env, load_settings
from orm_bigquery_cli.console import console, print_success, print_error


def doctor_command() -> bool:
    """Checks settings, credentials and dataset access. Returns True when all pass."""
    console.print(Panel("[bold cyan]BigQuery Adapter Doctor[/bold cyan]"))

    # 1. Settings
    try:
        settings = load_settings()
    except AdapterError as e:
        print_error(str(e))
        return False

    settings_ok = True
    for label, value in (
        ("BIGQUERY_DATASET", settings.dataset),
        ("GOOGLE_CREDENTIALS", settings.service_account_credentials),
    ):
        if value:
            print_success(f"{label} is set.")
        else:
            print_error(f"{label} is not set.")
            settings_ok = False
    if not settings_ok:
        return False

    # 2. Configuration
    try:
        adapter = connection_from_env()
    except AdapterError as e:
        print_error(str(e))
        return False
    print_success(f"Configuration valid (dataset {adapter.config.dataset}).")

    # 3. Connectivity
    try:
        exists = adapter.database_exists()
    except (GoogleAPICallError, GoogleAuthError, AdapterError) as e:
        print_error(f"Could not reach BigQuery: {e}")
        return False
    finally:
        adapter.disconnect()

    if not exists:
        print_error(f"Dataset {adapter.config.dataset} does not exist.")
        return False
    print_success("Dataset found.")

    # 4. Capabilities
    table = Table(title="Capabilities", show_header=True, header_style="bold magenta")
    table.add_column("Capability")
    table.add_column("Supported")
    for capability in AdapterCapability:
        supported = adapter.supports(capability)
        table.add_row(capability.value, "[green]yes[/green]" if supported else "[red]no[/red]")
    console.print(table)
    return True
