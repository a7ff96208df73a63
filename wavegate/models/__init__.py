"""Model exports."""

from .events import EventSink, GatewayEvent, ListenerReady, RecordProcessed
from .qso import QSO, QSO_FIELDS
from .status import ForwardStatus, StatusKind

__all__ = [
    "QSO",
    "QSO_FIELDS",
    "ForwardStatus",
    "StatusKind",
    "ListenerReady",
    "RecordProcessed",
    "GatewayEvent",
    "EventSink",
]
