"""Unit tests for the resource scope manager."""

import pytest

from hbase_client.core.config import HBaseConfig
from hbase_client.core.errors import (
    CoordinationConnectionError,
    InvalidArgumentError,
    ServiceError,
    TableNotFoundError,
)
from hbase_client.core.scope import ResourceScope


class Handle:
    def __init__(self, properties, fail_close=False):
        self.properties = properties
        self.fail_close = fail_close
        self.closed = 0

    def close(self):
        self.closed += 1
        if self.fail_close:
            raise IOError("close failed")


class RecordingFactory:
    """Hands out handles and remembers them."""

    def __init__(self, fail_connect=False, fail_close=False, known_tables=(b"t",)):
        self.fail_connect = fail_connect
        self.fail_close = fail_close
        self.known_tables = set(known_tables)
        self.handles = []

    def create_admin(self, properties):
        if self.fail_connect:
            raise CoordinationConnectionError("no quorum")
        handle = Handle(properties, self.fail_close)
        self.handles.append(handle)
        return handle

    def create_table(self, properties, name):
        if name not in self.known_tables:
            raise TableNotFoundError(name)
        handle = Handle(properties, self.fail_close)
        self.handles.append(handle)
        return handle


@pytest.fixture
def factory():
    return RecordingFactory()


@pytest.fixture
def scope(factory):
    return ResourceScope(factory, HBaseConfig())


def test_with_admin_returns_result_and_releases(scope, factory):
    """Test that the admin handle is closed after a successful op."""
    assert scope.with_admin(lambda admin: 42) == 42
    assert [h.closed for h in factory.handles] == [1]


def test_with_admin_releases_on_error(scope, factory):
    """Test that the admin handle is closed when the op raises."""
    def op(admin):
        raise RuntimeError("boom")

    with pytest.raises(ServiceError) as excinfo:
        scope.with_admin(op)

    assert isinstance(excinfo.value.cause, RuntimeError)
    assert factory.handles[0].closed == 1


def test_with_admin_acquisition_failure_is_service_error():
    """Test that an unreachable coordination service surfaces as ServiceError."""
    scope = ResourceScope(RecordingFactory(fail_connect=True), HBaseConfig())

    with pytest.raises(ServiceError) as excinfo:
        scope.with_admin(lambda admin: None)

    assert isinstance(excinfo.value.cause, CoordinationConnectionError)


def test_with_admin_rejects_non_callable(scope):
    """Test that a missing op is rejected before any connection."""
    with pytest.raises(InvalidArgumentError):
        scope.with_admin(None)


@pytest.mark.parametrize("name", ["", "   ", None])
def test_with_table_rejects_blank_name(scope, factory, name):
    """Test that blank table names fail before acquiring a handle."""
    with pytest.raises(InvalidArgumentError):
        scope.with_table(name, lambda table: None)
    assert factory.handles == []


def test_with_table_wraps_any_error(scope, factory):
    """Test that op errors of any kind come back as ServiceError."""
    def op(table):
        raise KeyError("missing")

    with pytest.raises(ServiceError) as excinfo:
        scope.with_table("t", op)

    assert isinstance(excinfo.value.cause, KeyError)
    assert factory.handles[0].closed == 1


def test_with_table_keeps_service_error(scope):
    """Test that a ServiceError raised by the op is not wrapped twice."""
    original = ServiceError("already wrapped")

    def op(table):
        raise original

    with pytest.raises(ServiceError) as excinfo:
        scope.with_table("t", op)

    assert excinfo.value is original


@pytest.mark.parametrize("close_on_exit", [True, False])
def test_with_table_keeps_invalid_argument(scope, factory, close_on_exit):
    """Test that an InvalidArgumentError from the op passes through unwrapped."""
    def op(table):
        raise InvalidArgumentError("qualifier must not be blank")

    with pytest.raises(InvalidArgumentError):
        scope.with_table("t", op, close_on_exit=close_on_exit)

    assert factory.handles[0].closed == 1


def test_with_admin_keeps_invalid_argument(scope, factory):
    """Test that with_admin also passes an InvalidArgumentError through."""
    def op(admin):
        raise InvalidArgumentError("name must not be blank")

    with pytest.raises(InvalidArgumentError):
        scope.with_admin(op)

    assert factory.handles[0].closed == 1


def test_with_table_missing_table(scope):
    """Test that acquiring a handle for an unknown table is a ServiceError."""
    with pytest.raises(ServiceError) as excinfo:
        scope.with_table("nope", lambda table: None)
    assert isinstance(excinfo.value.cause, TableNotFoundError)


def test_with_table_deferred_close(scope, factory):
    """Test that close_on_exit=False leaves the handle open for the caller."""
    handle = scope.with_table("t", lambda table: table, close_on_exit=False)

    assert handle.closed == 0


def test_with_table_deferred_close_still_releases_on_error(scope, factory):
    """Test that a failing op releases the handle even with deferred close."""
    def op(table):
        raise ValueError("bad version count")

    with pytest.raises(ServiceError):
        scope.with_table("t", op, close_on_exit=False)

    assert factory.handles[0].closed == 1


def test_release_failure_propagates():
    """Test that a failing close after success raises ServiceError."""
    scope = ResourceScope(RecordingFactory(fail_close=True), HBaseConfig())

    with pytest.raises(ServiceError) as excinfo:
        scope.with_table("t", lambda table: "ok")

    assert isinstance(excinfo.value.cause, IOError)


def test_release_failure_does_not_hide_op_error():
    """Test that the op error wins over a close error."""
    scope = ResourceScope(RecordingFactory(fail_close=True), HBaseConfig())

    def op(table):
        raise RuntimeError("op failed")

    with pytest.raises(ServiceError) as excinfo:
        scope.with_table("t", op)

    assert isinstance(excinfo.value.cause, RuntimeError)


def test_handles_get_config_snapshot(factory):
    """Test that later property changes do not reach an open handle."""
    config = HBaseConfig()
    scope = ResourceScope(factory, config)

    handle = scope.with_table("t", lambda table: table, close_on_exit=False)
    config.add_properties({"hbase.rpc.timeout": 7000})

    assert "hbase.rpc.timeout" not in handle.properties
    assert scope.with_admin(lambda admin: admin.properties["hbase.rpc.timeout"]) == "7000"
