"""Tests for configuration and logging helpers."""

import json
import logging
from pathlib import Path

import pytest

from scenecore.config import (
    DEFAULT_DB_PATH,
    DEFAULT_RPC_TIMEOUT,
    PROJECT_ROOT,
    get_current_project,
    parse_service_specs,
    resolve_db_path,
    rpc_timeout,
    set_current_project,
)
from scenecore.logging_config import JSONFormatter, operation_context, setup_logging
from scenecore.models import child_operation, new_operation


class TestResolveDbPath:
    """Tests for resolve_db_path."""

    def test_default(self):
        assert resolve_db_path() == DEFAULT_DB_PATH

    def test_memory(self):
        assert resolve_db_path(":memory:") == ":memory:"

    def test_relative(self):
        assert resolve_db_path("03_data/x.db") == PROJECT_ROOT / "03_data/x.db"

    def test_absolute(self, tmp_path):
        target = tmp_path / "x.db"
        assert resolve_db_path(str(target)) == Path(target)


class TestCurrentProject:
    """Tests for the process-wide default project."""

    def test_set_and_get(self, restore_project):
        set_current_project("shop")
        assert get_current_project() == "shop"
        set_current_project("billing")
        assert get_current_project() == "billing"


class TestParseServiceSpecs:
    """Tests for SCENE_SERVICES parsing."""

    def test_empty(self):
        assert parse_service_specs(None) == {}
        assert parse_service_specs("") == {}

    def test_entries(self):
        specs = parse_service_specs("shop=app.shop:Shop, billing = app.billing:gateway,")
        assert specs == {"shop": "app.shop:Shop", "billing": "app.billing:gateway"}

    @pytest.mark.parametrize("value", ["shop", "shop=app.shop", "=app"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_service_specs(value)


class TestRpcTimeout:
    """Tests for RPC_TIMEOUT."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv("RPC_TIMEOUT", raising=False)
        assert rpc_timeout() == DEFAULT_RPC_TIMEOUT

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("RPC_TIMEOUT", "2.5")
        assert rpc_timeout() == 2.5


class TestLogging:
    """Tests for structured logging."""

    def test_operation_context(self):
        """Test the trace fields attached to log records."""
        op = child_operation(new_operation("checkout"))
        assert operation_context(op) == {
            "trace_id": op.trace_id,
            "span_id": op.span_id,
            "parent_span_id": op.parent_span_id,
            "trace_op": "checkout",
        }

    def test_json_formatter_includes_context(self):
        """Test that the JSON formatter emits the context."""
        op = new_operation("checkout")
        record = logging.LogRecord(
            name="scenecore.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="hello %s",
            args=("world",),
            exc_info=None,
        )
        record.context = operation_context(op)

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["context"]["trace_id"] == op.trace_id

    def test_json_formatter_lifts_trace_fields(self):
        """Test that trace id and operation name are top-level keys."""
        op = child_operation(new_operation("checkout"))
        record = logging.LogRecord(
            "scenecore.test", logging.WARNING, __file__, 1, "late", None, None
        )
        record.context = operation_context(op)

        data = json.loads(JSONFormatter().format(record))

        assert data["trace_id"] == op.trace_id
        assert data["trace_op"] == "checkout"
        assert data["context"]["parent_span_id"] == op.parent_span_id

    def test_json_formatter_without_context(self):
        """Test that plain records carry no trace keys."""
        record = logging.LogRecord(
            "scenecore.test", logging.INFO, __file__, 1, "plain", None, None
        )

        data = json.loads(JSONFormatter().format(record))

        assert "trace_id" not in data
        assert "context" not in data

    def test_setup_logging_writes_json_file(self, tmp_path):
        """Test that setup_logging routes records to the rotating file."""
        log_file = tmp_path / "logs" / "app.log"
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("debug", str(log_file))
            op = new_operation("checkout")
            logging.getLogger("scenecore.test").info(
                "stored", extra={"context": operation_context(op)}
            )
            for handler in root.handlers:
                handler.flush()

            line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
            assert json.loads(line)["trace_id"] == op.trace_id
            assert root.level == logging.DEBUG
        finally:
            for handler in root.handlers:
                if handler not in saved_handlers:
                    handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    @pytest.mark.asyncio
    async def test_scene_logs_failures_with_context(self, scene, fake_database, caplog):
        """Test that port failures are logged with the trace."""
        from fakes import Order

        fake_database.error = RuntimeError("boom")
        with caplog.at_level(logging.ERROR, logger="scenecore"):
            with pytest.raises(RuntimeError):
                await scene.update(Order(id=1))

        [record] = [r for r in caplog.records if r.name == "scenecore.scene.scene"]
        assert record.context["trace_id"] == scene.operation.trace_id
