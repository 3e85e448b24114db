"""Process-local application store"""

import threading
from typing import Any, Dict
from origination_gateway.domain.models import Application
from origination_gateway.infrastructure.store.base import ApplicationStore, from_payload, to_payload


class InMemoryApplicationStore(ApplicationStore):
    """Keeps serialized payloads so no caller ever shares a mutable record"""

    def __init__(self):
        super().__init__()
        self._records: Dict[str, Dict[str, Any]] = {}
        self._write_lock = threading.Lock()

    def get(self, application_id: str) -> Application | None:
        payload = self._records.get(application_id)
        return from_payload(payload) if payload is not None else None

    def set(self, application: Application) -> None:
        with self._write_lock:
            self._records[application.application_id] = to_payload(application)

    def compare_and_swap(self, application: Application, expected_version: int) -> bool:
        with self._write_lock:
            current = self._records.get(application.application_id)
            if current is None or current["version"] != expected_version:
                return False
            application.version = expected_version + 1
            self._records[application.application_id] = to_payload(application)
            return True

    def __len__(self) -> int:
        return len(self._records)
