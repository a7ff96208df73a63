"""Events emitted by the gateway pipeline to its subscriber."""

from __future__ import annotations

from typing import Callable, Union

from pydantic import BaseModel, ConfigDict

from .qso import QSO
from .status import ForwardStatus


class ListenerReady(BaseModel):
    """Settings are loaded and the pipeline is about to listen."""

    model_config = ConfigDict(frozen=True)

    host: str
    port: int
    url: str


class RecordProcessed(BaseModel):
    """A forward attempt for one QSO has completed."""

    model_config = ConfigDict(frozen=True)

    qso: QSO
    status: ForwardStatus


GatewayEvent = Union[ListenerReady, RecordProcessed]
EventSink = Callable[[GatewayEvent], None]
