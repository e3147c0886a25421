"""Short-lived in-memory report store."""

import threading
import time
from collections import OrderedDict
from typing import Callable, Optional

from .models import Report


class ReportStore:
    """Thread-safe TTL map of report id to report.

    When full, the oldest insertion is evicted. Reports are frozen, so a
    stored report can never be mutated through this store.
    """

    def __init__(self, ttl_seconds: float = 600.0, max_entries: int = 400,
                 clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl_seconds
        self._max = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, tuple[Report, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def put(self, report_id: str, report: Report) -> None:
        with self._lock:
            self._entries.pop(report_id, None)
            while len(self._entries) >= self._max:
                self._entries.popitem(last=False)
            self._entries[report_id] = (report, self._clock() + self._ttl)

    def get(self, report_id: str) -> Optional[Report]:
        with self._lock:
            entry = self._entries.get(report_id)
            if entry is None:
                return None
            report, expires = entry
            if self._clock() > expires:
                del self._entries[report_id]
                return None
            return report

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
