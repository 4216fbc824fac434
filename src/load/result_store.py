"""
Last Result Store - Load Layer

Single-slot, in-memory cache of the most recent successful classification.
Owned by the host and passed explicitly to whoever needs it; never persisted.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..transformation.classifier import AlertSets


class NoPriorResultError(LookupError):
    """Submission requested before any acquisition completed"""

    def __init__(self, message: str = "No assessment has been computed yet"):
        super().__init__(message)


@dataclass(frozen=True)
class StoredResult:
    alert_sets: AlertSets
    computed_at: datetime
    patient_count: int


class LastResultStore:
    """Holds at most one result; each put() replaces it atomically"""

    def __init__(self):
        self._lock = threading.Lock()
        self._result: Optional[StoredResult] = None

    def put(self, alert_sets: AlertSets, patient_count: int = 0) -> StoredResult:
        result = StoredResult(
            alert_sets=alert_sets,
            computed_at=datetime.now(timezone.utc),
            patient_count=patient_count,
        )
        with self._lock:
            self._result = result
        return result

    def get(self) -> Optional[StoredResult]:
        with self._lock:
            return self._result

    def require(self) -> StoredResult:
        result = self.get()
        if result is None:
            raise NoPriorResultError()
        return result
