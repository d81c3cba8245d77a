"""
Unit tests for contextual logging.
"""

import logging

import pytest

from mdb_docs.observability import (
    ContextualLoggerAdapter,
    correlation_scope,
    get_correlation_id,
    get_logger,
    get_logging_context,
    log_operation,
    store_context,
)


class TestLoggingContext:
    """Test correlation scopes and store context."""

    def test_generated_correlation_id(self):
        with correlation_scope() as correlation_id:
            assert correlation_id
            assert get_correlation_id() == correlation_id
            assert get_logging_context()["correlation_id"] == correlation_id

        assert get_correlation_id() is None

    def test_nested_scope_keeps_outer_id(self):
        with correlation_scope("req-1"):
            with correlation_scope() as inner:
                assert inner == "req-1"
            with correlation_scope("req-2"):
                assert get_correlation_id() == "req-2"
            assert get_correlation_id() == "req-1"

    def test_store_context_nests_and_resets(self):
        with store_context("app", collection_name="users"):
            with store_context(document_id="u1", skipped=None):
                context = get_logging_context()
                assert context == {"db_name": "app", "collection_name": "users", "document_id": "u1"}
            assert "document_id" not in get_logging_context()

        assert get_logging_context() == {}


class TestContextualLoggerAdapter:
    """Test that records carry the context."""

    def test_get_logger(self):
        assert isinstance(get_logger("mdb_docs.test"), ContextualLoggerAdapter)

    def test_record_has_context_and_extra(self, caplog):
        logger = get_logger("mdb_docs.test")

        with caplog.at_level(logging.INFO, logger="mdb_docs.test"):
            with correlation_scope("req-1"), store_context("app", collection_name="users"):
                logger.info("Fetched page", extra={"collection_name": "posts"})

        record = caplog.records[-1]
        assert record.correlation_id == "req-1"
        assert record.db_name == "app"
        assert record.collection_name == "posts"


class TestLogOperation:
    """Test structured per-operation log lines."""

    def test_failed_operation(self, caplog):
        logger = logging.getLogger("mdb_docs.test")

        with caplog.at_level(logging.DEBUG, logger="mdb_docs.test"):
            log_operation(
                logger, "documents.move", logging.DEBUG, False, 12.5, collection_name="inbox"
            )

        record = caplog.records[-1]
        assert record.getMessage() == "Operation failed: documents.move (duration: 12.50ms)"
        assert record.success is False
        assert record.duration_ms == 12.5
        assert record.collection_name == "inbox"


class TestStoreOperationLogging:
    """Test that store operations log with their database and collection."""

    @pytest.mark.asyncio
    async def test_operation_line_carries_store_context(self, store, caplog):
        with caplog.at_level(logging.DEBUG, logger="mdb_docs.observability.metrics"):
            await store.get_one("users", ("email", "==", "a@b.c"))

        records = [r for r in caplog.records if getattr(r, "operation", None) == "documents.get_one"]
        assert len(records) == 1
        assert records[0].db_name == "test_db"
        assert records[0].collection_name == "users"
        assert records[0].correlation_id
        assert get_logging_context() == {}

    @pytest.mark.asyncio
    async def test_caller_correlation_id_is_kept(self, store, caplog):
        with caplog.at_level(logging.DEBUG, logger="mdb_docs.observability.metrics"):
            with correlation_scope("req-7"):
                await store.remove_one("inbox", "m1")

        record = next(r for r in caplog.records if getattr(r, "operation", None))
        assert record.correlation_id == "req-7"
        assert record.collection_name == "inbox"

    @pytest.mark.asyncio
    async def test_move_logs_source_collection(self, store, collections, caplog):
        source = store.collection("inbox")
        source.find_one.return_value = {"_id": "m1", "subject": "hi"}

        with caplog.at_level(logging.DEBUG, logger="mdb_docs.observability.metrics"):
            await store.move(from_collection="inbox", to_collection="archive", document_id="m1")

        record = next(
            r for r in caplog.records if getattr(r, "operation", None) == "documents.move"
        )
        assert record.collection_name == "inbox"
        assert record.success is True
