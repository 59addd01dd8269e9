"""
Client-side cache: one process-wide store of named collection slots.

Each slot holds an immutable snapshot of the last committed server payload.
Writes replace the whole slot, never merge into it. Any number of views may
subscribe to a slot; they are called with the new snapshot after each write.
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Optional

# Slot names
AUTH_USER = "authUser"
ALL_JOBS = "allJobs"
ALL_ADMIN_JOBS = "allAdminJobs"
ALL_APPLIED_JOBS = "allAppliedJobs"
COMPANIES = "companies"


def applicants_slot(job_id: str) -> str:
    return f"applicantsForJob:{job_id}"


def single_job_slot(job_id: str) -> str:
    return f"singleJob:{job_id}"


def freeze(value: Any) -> Any:
    """Deep-copy a JSON payload into read-only mappings and tuples."""
    if isinstance(value, dict):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


Subscriber = Callable[[Any], None]


class Store:
    """Keyed snapshots plus the last failure per slot."""

    def __init__(self) -> None:
        self._slots: Dict[str, Any] = {}
        self._errors: Dict[str, Exception] = {}
        self._subscribers: Dict[str, List[Subscriber]] = {}

    def get(self, slot: str, default: Any = None) -> Any:
        return self._slots.get(slot, default)

    def has(self, slot: str) -> bool:
        return slot in self._slots

    def replace(self, slot: str, value: Any) -> None:
        """Commit a new snapshot. Clears the slot's recorded error."""
        self._slots[slot] = freeze(value)
        self._errors.pop(slot, None)
        self._notify(slot)

    def error(self, slot: str) -> Optional[Exception]:
        return self._errors.get(slot)

    def record_error(self, slot: str, error: Exception) -> None:
        """Remember a failed fetch. The slot's snapshot stays as it was."""
        self._errors[slot] = error

    def identity(self) -> Optional[Any]:
        return self._slots.get(AUTH_USER)

    def reset(self, keep: Iterable[str] = ()) -> None:
        """Drop every slot except keep, e.g. viewer-specific data on logout."""
        keep = set(keep)
        dropped = [slot for slot in self._slots if slot not in keep]
        for slot in dropped:
            del self._slots[slot]
            self._errors.pop(slot, None)
            self._notify(slot)

    def subscribe(self, slot: str, callback: Subscriber) -> Callable[[], None]:
        """Watch a slot. Returns the function that unsubscribes."""
        self._subscribers.setdefault(slot, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(slot, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                self._subscribers.pop(slot, None)

        return unsubscribe

    def _notify(self, slot: str) -> None:
        value = self._slots.get(slot)
        for callback in list(self._subscribers.get(slot, ())):
            callback(value)


# Global store instance
_global_store: Optional[Store] = None


def get_store() -> Store:
    """Get or create the process-wide store."""
    global _global_store
    if _global_store is None:
        _global_store = Store()
    return _global_store


def reset_store() -> None:
    """Reset the global store (useful for testing)."""
    global _global_store
    _global_store = None
