from typing import Any, Dict, List, Optional, Sequence

from google.cloud import bigquery

from orm_adapter_sdk import (
    DryRunResult,
    QueryPlan,
    QueryResult,
    StatementInvalid,
    build_read_query_regexp,
)

READ_QUERY = build_read_query_regexp(
    "begin", "commit", "explain", "release", "rollback", "savepoint", "select", "with"
)


def is_write_query(sql: str) -> bool:
    """Whether ``sql`` is a write. Only the leading keyword is inspected."""
    return READ_QUERY.match(sql) is None


class BigQueryDatabaseStatements:
    """Statement execution against the BigQuery jobs API.

    Bind values are logged but never sent; BigQuery rejects ``?``
    placeholders, which surfaces as ``StatementInvalid``.
    """

    def write_query(self, sql: str) -> bool:
        return is_write_query(sql)

    def execute(self, sql: str, name: Optional[str] = None) -> List[Dict[str, Any]]:
        self.check_if_write_query(sql)

        with self.log(sql, name):
            result = self._run_query(sql)
            return [{str(key): value for key, value in row.items()} for row in result]

    def exec_query(
        self, sql: str, name: Optional[str] = "SQL", binds: Sequence[Any] = (), prepare: bool = False
    ) -> QueryResult:
        self.check_if_write_query(sql)

        with self.log(sql, name, binds):
            result = self._run_query(sql)
            columns = [field.name for field in (result.schema or [])]
            rows = [list(row.values()) for row in result]
            return QueryResult(
                columns=columns,
                rows=rows,
                row_count=len(rows),
                affected_rows=getattr(result, "num_dml_affected_rows", None),
            )

    def dry_run(self, sql: str) -> DryRunResult:
        """Validates a statement without running it."""
        try:
            job = self._dry_run_job(sql)
        except StatementInvalid as exc:
            return DryRunResult(is_valid=False, error_message=str(exc))
        return DryRunResult(is_valid=True, total_bytes_processed=job.total_bytes_processed)

    def explain(self, sql: str) -> QueryPlan:
        job = self._dry_run_job(sql)
        return QueryPlan(
            plan_text=f"This query will process {job.total_bytes_processed} bytes.",
            total_bytes_processed=job.total_bytes_processed,
        )

    def last_inserted_id(self) -> Any:
        return None

    def begin_db_transaction(self) -> None:
        pass

    def commit_db_transaction(self) -> None:
        pass

    def rollback_db_transaction(self) -> None:
        pass

    def build_truncate_statement(self, table_name: str) -> str:
        if self.config.truncate_strategy == "drop":
            return f"DROP TABLE {self.quote_table_name(table_name)}"
        return f"DELETE FROM {self.quote_table_name(table_name)} WHERE TRUE"

    def _job_config(self, **options: Any) -> bigquery.QueryJobConfig:
        return bigquery.QueryJobConfig(default_dataset=self.default_dataset, **options)

    def _run_query(self, sql: str):
        job = self.raw_connection.query(sql, job_config=self._job_config(), timeout=self.config.timeout)
        return job.result(timeout=self.config.timeout)

    def _dry_run_job(self, sql: str):
        self.check_if_write_query(sql)
        with self.log(sql, "EXPLAIN"):
            return self.raw_connection.query(
                sql,
                job_config=self._job_config(dry_run=True, use_query_cache=False),
                timeout=self.config.timeout,
            )
