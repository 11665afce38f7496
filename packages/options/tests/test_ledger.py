"""Tests for the assignment ledger."""

import gc
import threading
from dataclasses import dataclass

from framework_options import AssignmentLedger


@dataclass
class Record:
    Port: int = 0


class Slotted:
    __slots__ = ("Port",)

    def __init__(self) -> None:
        self.Port = 0


class TestAssignmentLedger:
    """Test recording and lookup of assigned fields."""

    def test_record_and_lookup(self, ledger):
        record = Record()
        ledger.record(record, {"Port"})

        assert ledger.was_assigned(record, "Port")
        assert not ledger.was_assigned(record, "Host")
        assert ledger.assigned_fields(record) == frozenset({"Port"})

    def test_unknown_instance(self, ledger):
        """Instances never recorded report nothing assigned."""
        assert not ledger.was_assigned(Record(), "Port")
        assert ledger.assigned_fields(Record()) == frozenset()

    def test_last_record_replaces(self, ledger):
        record = Record()
        ledger.record(record, {"Port", "Host"})
        ledger.record(record, {"Host"})

        assert not ledger.was_assigned(record, "Port")
        assert ledger.was_assigned(record, "Host")
        assert len(ledger) == 1

    def test_identity_not_equality(self, ledger):
        """Structurally equal instances are tracked independently."""
        first, second = Record(), Record()
        assert first == second

        ledger.record(first, {"Port"})

        assert ledger.was_assigned(first, "Port")
        assert not ledger.was_assigned(second, "Port")

    def test_forget_and_clear(self, ledger):
        first, second = Record(), Record()
        ledger.record(first, {"Port"})
        ledger.record(second, {"Port"})

        ledger.forget(first)
        assert not ledger.was_assigned(first, "Port")
        assert ledger.was_assigned(second, "Port")

        ledger.clear()
        assert len(ledger) == 0

    def test_entry_evicted_when_instance_collected(self, ledger):
        record = Record()
        ledger.record(record, {"Port"})
        assert len(ledger) == 1

        del record
        gc.collect()

        assert len(ledger) == 0

    def test_instances_without_weakref_support(self, ledger):
        """Slotted instances are held by the ledger instead of weakly referenced."""
        slotted = Slotted()
        ledger.record(slotted, {"Port"})

        assert ledger.was_assigned(slotted, "Port")
        assert not ledger.was_assigned(Slotted(), "Port")

    def test_concurrent_records(self):
        """Concurrent writers do not corrupt the ledger."""
        ledger = AssignmentLedger()
        records = [Record() for _ in range(200)]

        def _worker(chunk):
            for record in chunk:
                ledger.record(record, {"Port"})

        threads = [threading.Thread(target=_worker, args=(records[i::4],)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(ledger) == 200
        assert all(ledger.was_assigned(record, "Port") for record in records)
