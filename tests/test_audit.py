"""
Tests for the audit logger.
"""

from uuid import uuid4

from finance_tracker.audit import AuditLogger
from finance_tracker.models.audit import AuditEventBuilder, AuditEventType
from finance_tracker.services.storage import (
    InMemoryStore,
    KeyValueStore,
    StorageUnavailableError,
)


class BrokenStore(KeyValueStore):
    """A store whose every operation fails."""

    def get(self, key):
        raise StorageUnavailableError("disk gone")

    def set(self, key, records):
        raise StorageUnavailableError("disk gone")

    def is_available(self):
        return False


class TestAuditLogger:
    """Tests for local and persisted audit logging."""

    def test_persists_events(self):
        store = InMemoryStore()
        audit_logger = AuditLogger(store, key="finance-audit")
        transaction_id = uuid4()

        audit_logger.log_transaction_added(transaction_id, "Lunch", "12.50", "expense")

        records = store.get("finance-audit")
        assert len(records) == 1
        assert records[0]["event_type"] == "transaction_added"
        assert records[0]["entity_id"] == str(transaction_id)

    def test_recent_events_newest_first(self):
        audit_logger = AuditLogger(InMemoryStore())
        first, second = uuid4(), uuid4()

        audit_logger.log_budget_deleted(first, existed=True)
        audit_logger.log_budget_deleted(second, existed=False)

        events = audit_logger.recent_events()
        assert [e.entity_id for e in events] == [second, first]
        assert events[0].event_type == AuditEventType.BUDGET_DELETED

    def test_trail_is_capped(self):
        store = InMemoryStore()
        audit_logger = AuditLogger(store, max_events=3)
        ids = [uuid4() for _ in range(5)]

        for transaction_id in ids:
            audit_logger.log_transaction_deleted(transaction_id, existed=True)

        records = store.get("finance-audit")
        assert [r["entity_id"] for r in records] == [str(i) for i in ids[-3:]]

    def test_zero_cap_disables_persistence(self):
        store = InMemoryStore()
        audit_logger = AuditLogger(store, max_events=0)
        audit_logger.log_storage_error("write", "boom")
        assert store.get("finance-audit") == []
        assert audit_logger.recent_events() == []

    def test_local_only_logger(self):
        audit_logger = AuditLogger()
        assert audit_logger.recent_events() == []

    def test_storage_failure_is_not_raised(self):
        """Test a failing store never breaks the caller."""
        audit_logger = AuditLogger(BrokenStore())
        audit_logger.log_storage_error("write", "disk gone")
        assert audit_logger.recent_events() == []

    def test_log_reports_persistence_result(self):
        event = AuditEventBuilder.storage_fallback("json", "read-only")
        assert AuditLogger(InMemoryStore()).log(event) is True
        assert AuditLogger().log(event) is True
        assert AuditLogger(BrokenStore()).log(event) is False

    def test_validation_failure_details(self):
        store = InMemoryStore()
        audit_logger = AuditLogger(store)
        issues = [{"field": "amount", "type": "missing", "message": "Amount must be greater than 0"}]

        audit_logger.log_validation_failed("transaction", issues)

        record = store.get("finance-audit")[0]
        assert record["event_type"] == "validation_failed"
        assert record["severity"] == "warning"
        assert record["details"]["issues"] == issues
