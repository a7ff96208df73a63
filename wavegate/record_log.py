"""In-memory view of recently processed QSOs for the status API."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional, Tuple

from wavegate.models import (
    QSO,
    ForwardStatus,
    GatewayEvent,
    ListenerReady,
    RecordProcessed,
)

MAX_LOG_LINES = 500


class RecordLog:
    """Event subscriber holding the newest records and a status line."""

    def __init__(self, max_records: int = MAX_LOG_LINES) -> None:
        self.records: Deque[Tuple[QSO, ForwardStatus]] = deque(maxlen=max_records)
        self.status_message = "Loading..."
        self.listen_info = ""

    def __call__(self, event: GatewayEvent) -> None:
        if isinstance(event, ListenerReady):
            self.listen_info = f"Listen: {event.host}:{event.port} | Wavelog: {event.url}"
            self.status_message = "Ready"
        elif isinstance(event, RecordProcessed):
            # Newest first; the deque drops the oldest once full.
            if event.qso.call:
                self.records.appendleft((event.qso, event.status))
                self.status_message = "QSO processed"

    def config_failed(self, error: Exception) -> None:
        self.status_message = f"Config load failed: {error}"
        self.listen_info = ""

    def listener_failed(self, error: Exception) -> None:
        self.status_message = f"Listener failed: {error}"

    def recent(self, limit: Optional[int] = None) -> List[dict]:
        """Serialize the newest ``limit`` records, most recent first."""
        rows = []
        for qso, status in list(self.records)[:limit]:
            rows.append(
                {
                    "qso": qso.model_dump(),
                    "status": status.display,
                    "kind": status.kind.value,
                    "detail": status.detail,
                }
            )
        return rows
