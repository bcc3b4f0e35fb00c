import pytest
from pydantic import ValidationError

from orm_adapter_sdk import (
    AdapterCapability,
    AdapterError,
    CapabilitySet,
    ConfigurationError,
    ErrorCode,
    NoDatabaseError,
    StatementInvalid,
    UnsupportedOperationError,
)


def test_capability_set_is_frozen():
    caps = CapabilitySet(transactions=False)

    with pytest.raises(ValidationError):
        caps.transactions = True


def test_supports_and_enabled():
    caps = CapabilitySet(indexes=False, explain=True)

    assert caps.supports(AdapterCapability.EXPLAIN)
    assert not caps.supports(AdapterCapability.INDEXES)
    assert AdapterCapability.EXPLAIN in caps.enabled()
    assert AdapterCapability.INDEXES not in caps.enabled()


def test_every_capability_has_a_flag():
    caps = CapabilitySet()

    assert set(CapabilitySet.model_fields) == {c.value for c in AdapterCapability}
    assert all(isinstance(caps.supports(c), bool) for c in AdapterCapability)


def test_error_hierarchy():
    assert issubclass(ConfigurationError, ValueError)
    assert issubclass(UnsupportedOperationError, NotImplementedError)
    assert issubclass(NoDatabaseError, StatementInvalid)

    error = NoDatabaseError("gone", sql="SELECT 1", binds=(1,))
    assert isinstance(error, AdapterError)
    assert error.error_code == ErrorCode.NO_DATABASE
    assert error.sql == "SELECT 1"
    assert error.binds == [1]
