#!/usr/bin/env python3
"""Operator CLI for the BigQuery connection adapter."""
import pathlib
from contextlib import contextmanager
from typing import Iterator, List, Optional
from typing_extensions import Annotated

import typer

from orm_adapter_sdk import AdapterError
from orm_adapter_sdk.logger import configure_logging
from orm_bigquery import BigQueryAdapter
from orm_bigquery.settings import connection_from_env

from orm_bigquery_cli.commands.doctor import doctor_command
from orm_bigquery_cli.commands.info import list_available_adapters
from orm_bigquery_cli.commands.inspect import describe_table, dump_schema, list_tables
from orm_bigquery_cli.console import print_error

app = typer.Typer(
    name="orm-bigquery",
    help="Inspect a BigQuery dataset through the ORM connection adapter.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def global_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log SQL statements and client activity")] = False,
    json_logs: Annotated[bool, typer.Option("--json-logs", help="Emit logs as JSON")] = False,
):
    """
    BigQuery adapter CLI. Connection settings come from the environment (or .env).
    """
    configure_logging(level="DEBUG" if verbose else "WARNING", json_format=json_logs)


@app.command()
def adapters():
    """
    List installed connection adapters.
    """
    list_available_adapters()


@app.command()
def doctor():
    """
    Check settings, credentials and access to the configured dataset.
    """
    if not doctor_command():
        raise typer.Exit(code=1)


@app.command()
def tables():
    """
    List the tables in the configured dataset.
    """
    with _connected_adapter() as adapter:
        list_tables(adapter)


@app.command()
def columns(
    table: Annotated[str, typer.Argument(help="Table name")],
):
    """
    Describe the columns of a table.
    """
    with _connected_adapter() as adapter:
        describe_table(adapter, table)


@app.command("schema-dump")
def schema_dump(
    output: Annotated[Optional[pathlib.Path], typer.Option("--output", "-o", help="Write the YAML schema to this file")] = None,
    ignore: Annotated[Optional[List[str]], typer.Option("--ignore", help="Table to leave out (repeatable)")] = None,
):
    """
    Dump the dataset schema as YAML.
    """
    with _connected_adapter() as adapter:
        dump_schema(adapter, output, ignore)


@contextmanager
def _connected_adapter() -> Iterator[BigQueryAdapter]:
    """Builds the adapter from env settings and disconnects it afterwards; adapter errors exit 1."""
    try:
        adapter = connection_from_env()
    except AdapterError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    try:
        yield adapter
    except AdapterError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    finally:
        adapter.disconnect()


if __name__ == "__main__":
    app()
