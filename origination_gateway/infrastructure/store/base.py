"""Keyed application store interface, per-key locking and record serialization"""

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator
from pydantic import TypeAdapter
from origination_gateway.domain.models import Application

application_adapter = TypeAdapter(Application)


def to_payload(application: Application) -> Dict[str, Any]:
    """JSON-safe dict of the full record (sensitive card fields included)"""
    return application_adapter.dump_python(application, mode="json")


def from_payload(payload: Dict[str, Any]) -> Application:
    """Validate a stored payload back into a fresh Application"""
    return application_adapter.validate_python(payload)


class KeyedLock:
    """One mutex per key, alive only while some thread holds or waits on it"""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._waiters: Dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._waiters[key] -= 1
                if not self._waiters[key]:
                    del self._waiters[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class ApplicationStore(ABC):
    """
    Keyed persistent record of every application.

    Stages follow lock -> get -> mutate -> compare_and_swap so that at most
    one mutation per application id is in flight.
    """

    def __init__(self):
        self._locks = KeyedLock()

    def lock(self, application_id: str):
        """Context manager serializing mutations of one application"""
        return self._locks.hold(application_id)

    @abstractmethod
    def get(self, application_id: str) -> Application | None:
        """Load a detached copy of the record, or None"""

    @abstractmethod
    def set(self, application: Application) -> None:
        """Insert or overwrite the record unconditionally"""

    @abstractmethod
    def compare_and_swap(self, application: Application, expected_version: int) -> bool:
        """
        Write the record only if the stored version equals expected_version.

        On success application.version is bumped to expected_version + 1.
        Returns False when the record is missing or has moved on.
        """
