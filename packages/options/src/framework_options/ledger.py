"""Tracking of which fields of a bound instance received a value.

The ledger correlates an options instance, by reference identity, with the
set of field names the loader successfully assigned. Validation consults it
to tell "assigned but invalid" apart from "never assigned".

Example:
    ```python
    ledger = AssignmentLedger()
    ledger.record(settings, {"Port", "Host"})
    ledger.was_assigned(settings, "Port")
    # True
    ledger.was_assigned(other_settings, "Port")
    # False
    ```
"""

from __future__ import annotations

import threading
import weakref
from typing import Any, Dict, FrozenSet, Iterable, Tuple


class AssignmentLedger:
    """Thread-safe map of instance identity to assigned field names.

    Instances are keyed by ``id()``, never by equality or hash, so two
    structurally equal instances are tracked independently and unhashable
    instances are supported. Entries for instances that support weak
    references are dropped when the instance is garbage collected; other
    instances are kept alive by the ledger so their identity stays valid.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, Tuple[Any, FrozenSet[str]]] = {}
        self._lock = threading.RLock()

    def record(self, instance: Any, assigned: Iterable[str]) -> None:
        """Record the assigned field names for an instance.

        Replaces any previous entry for the same instance.

        Args:
            instance: Bound options instance
            assigned: Names of the fields that received a value
        """
        key = id(instance)
        names = frozenset(assigned)
        try:
            ref: Any = weakref.ref(instance, self._evictor(key))
        except TypeError:
            ref = instance

        with self._lock:
            self._entries[key] = (ref, names)

    def assigned_fields(self, instance: Any) -> FrozenSet[str]:
        """Get the field names assigned for an instance.

        Args:
            instance: Options instance

        Returns:
            Assigned field names; empty if the instance was never recorded
        """
        with self._lock:
            entry = self._entries.get(id(instance))
            if entry is None or not self._refers_to(entry[0], instance):
                return frozenset()
            return entry[1]

    def was_assigned(self, instance: Any, field_name: str) -> bool:
        """Check whether a field of an instance was assigned from a source."""
        return field_name in self.assigned_fields(instance)

    def forget(self, instance: Any) -> None:
        """Drop the entry for an instance, if any."""
        with self._lock:
            entry = self._entries.get(id(instance))
            if entry is not None and self._refers_to(entry[0], instance):
                del self._entries[id(instance)]

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evictor(self, key: int):
        ledger_ref = weakref.ref(self)

        def _evict(ref: weakref.ref) -> None:
            ledger = ledger_ref()
            if ledger is None:
                return
            with ledger._lock:
                entry = ledger._entries.get(key)
                # The id may already belong to a newer instance
                if entry is not None and entry[0] is ref:
                    del ledger._entries[key]

        return _evict

    @staticmethod
    def _refers_to(ref: Any, instance: Any) -> bool:
        if isinstance(ref, weakref.ref):
            return ref() is instance
        return ref is instance


default_ledger = AssignmentLedger()
