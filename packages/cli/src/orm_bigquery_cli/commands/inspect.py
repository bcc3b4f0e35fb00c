import pathlib
import sys
from typing import List, Optional

from rich.table import Table

from orm_bigquery import BigQueryAdapter
from orm_bigquery_cli.console import console, print_success, print_warning


def list_tables(adapter: BigQueryAdapter) -> None:
    tables = adapter.tables()
    if not tables:
        print_warning(f"No tables in dataset {adapter.config.dataset}.")
        return

    table = Table(title=f"Tables in {adapter.config.dataset}")
    table.add_column("Table", style="cyan")
    for name in sorted(tables):
        table.add_row(name)
    console.print(table)


def describe_table(adapter: BigQueryAdapter, table_name: str) -> None:
    table = Table(title=table_name)
    table.add_column("Column", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta")
    table.add_column("SQL Type")
    table.add_column("Null")

    for column in adapter.columns(table_name):
        table.add_row(column.name, column.type or "-", column.sql_type, "yes" if column.null else "no")
    console.print(table)


def dump_schema(adapter: BigQueryAdapter, output: Optional[pathlib.Path] = None, ignore_tables: Optional[List[str]] = None) -> None:
    dumper = adapter.create_schema_dumper({"ignore_tables": ignore_tables or []})
    if output is None:
        dumper.dump(sys.stdout)
        return

    with output.open("w", encoding="utf-8") as f:
        dumper.dump(f)
    print_success(f"Schema written to {output}")
