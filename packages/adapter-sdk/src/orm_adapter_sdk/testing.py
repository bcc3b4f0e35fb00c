"""
Standard Compliance Test Suite for connection adapters.
Any new adapter MUST pass these tests to be certified.

None of these tests may reach the remote engine; the ``adapter`` fixture
may hand back an adapter wired to a fake client.
"""
import pytest
from orm_adapter_sdk import (
    AdapterCapability,
    CapabilitySet,
    ConnectionAdapter,
    ReadOnlyError,
    UnsupportedOperationError,
)

CORE_TYPES = ("string", "integer", "float", "decimal", "datetime", "date", "time", "binary", "boolean")


class AdapterComplianceSuite:
    @pytest.fixture
    def adapter(self) -> ConnectionAdapter:
        """Override this fixture in subclass to return the adapter under test."""
        raise NotImplementedError

    def test_capabilities_contract(self, adapter):
        """Verify that capabilities returns a constant CapabilitySet."""
        caps = adapter.capabilities()
        assert isinstance(caps, CapabilitySet)
        assert caps == adapter.capabilities()
        for capability in AdapterCapability:
            assert isinstance(adapter.supports(capability), bool)

    def test_capabilities_ignore_connection_state(self, adapter):
        before = adapter.capabilities()
        adapter.connect()
        connected = adapter.capabilities()
        adapter.disconnect()

        assert before == connected == adapter.capabilities()

    def test_adapter_name(self, adapter):
        assert adapter.adapter_name()

    def test_connection_lifecycle(self, adapter):
        adapter.disconnect()
        assert not adapter.active()

        adapter.connect()
        assert adapter.active()

        adapter.disconnect()
        adapter.disconnect()
        assert not adapter.active()

    def test_transaction_hooks_never_raise(self, adapter):
        if adapter.supports(AdapterCapability.TRANSACTIONS):
            pytest.skip("Adapter runs real transactions")

        assert adapter.begin_db_transaction() is None
        assert adapter.commit_db_transaction() is None
        assert adapter.rollback_db_transaction() is None
        with adapter.transaction() as conn:
            assert conn is adapter

    def test_indexes_contract(self, adapter):
        if adapter.supports(AdapterCapability.INDEXES):
            pytest.skip("Adapter reports real indexes")

        assert adapter.indexes("any_table") == []
        assert adapter.indexes("no_such_table") == []

    def test_primary_keys_contract(self, adapter):
        if adapter.supports(AdapterCapability.PRIMARY_KEYS):
            pytest.skip("Adapter reports real primary keys")

        assert adapter.primary_keys("any_table") == []
        assert adapter.primary_key("any_table") is None

    def test_check_constraints_contract(self, adapter):
        if adapter.supports(AdapterCapability.CHECK_CONSTRAINTS):
            pytest.skip("Adapter supports check constraints")

        for table in ("any_table", "no_such_table"):
            with pytest.raises(UnsupportedOperationError):
                adapter.check_constraints(table)

    def test_write_prevented_before_execution(self, adapter):
        with adapter.while_preventing_writes():
            with pytest.raises(ReadOnlyError):
                adapter.execute("INSERT INTO compliance_probe (id) VALUES (1)")
            with pytest.raises(ReadOnlyError):
                adapter.exec_query("DELETE FROM compliance_probe WHERE TRUE")

    def test_core_types_round_trip(self, adapter):
        """Every core semantic type maps to a native type that reads back as itself."""
        native = adapter.native_database_types()
        for semantic in CORE_TYPES:
            assert semantic in native
            sql_type = adapter.type_to_sql(semantic)
            assert adapter.fetch_type_metadata(sql_type).type == semantic
