"""Listen, decode, validate and forward loop.

The gateway keeps exactly one UDP listen outstanding.  As soon as a datagram
arrives the next listen is started, then the payload is decoded and every
valid QSO is forwarded in its own task.  Forwards are never awaited by the
loop, so a slow Wavelog server cannot delay reception; their results reach
the event sink in completion order.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Set

from wavegate.adapters.udp import UdpListener
from wavegate.adapters.wavelog import send_qso
from wavegate.adif import parse_adif
from wavegate.errors import BindError
from wavegate.middleware.logging import log_debug, log_error, log_info, log_warning
from wavegate.models import (
    QSO,
    EventSink,
    ForwardStatus,
    ListenerReady,
    RecordProcessed,
    StatusKind,
)
from wavegate.settings import Settings

Listen = Callable[[str, int], Awaitable[bytes]]
Send = Callable[[QSO, Settings], Awaitable[ForwardStatus]]


async def listen_fresh(host: str, port: int) -> bytes:
    """Run one receive cycle on a newly created listener."""
    return await UdpListener(host, port).listen_once()


class Gateway:
    """Pipeline from UDP ingress to Wavelog egress."""

    def __init__(
        self,
        settings: Settings,
        sink: EventSink,
        listen: Listen = listen_fresh,
        send: Send = send_qso,
    ) -> None:
        self.settings = settings
        self.sink = sink
        self._listen = listen
        self._send = send
        self._forwards: Set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        """Number of forward operations that have not completed yet."""
        return len(self._forwards)

    def _listen_task(self) -> asyncio.Task:
        server = self.settings.server
        return asyncio.create_task(self._listen(server.host, server.port))

    async def run(self) -> None:
        """Receive and forward until cancelled or the listener cannot bind."""
        server = self.settings.server
        self.sink(ListenerReady(host=server.host, port=server.port, url=self.settings.wavelog.url))
        log_info("gateway_started", host=server.host, port=server.port, url=self.settings.wavelog.url)

        pending = self._listen_task()
        try:
            while True:
                try:
                    data = await pending
                except BindError as e:
                    log_error("gateway_listener_failed", address=e.address, error=str(e.cause))
                    raise
                pending = self._listen_task()
                self.process_datagram(data)
        finally:
            if not pending.done():
                pending.cancel()

    def process_datagram(self, data: bytes) -> List[asyncio.Task]:
        """Decode one datagram and start a forward for each valid QSO."""
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            log_warning("udp_datagram_not_utf8", size=len(data), error=str(e))
            return []

        tasks = []
        for qso in parse_adif(text):
            if not qso.is_valid:
                log_debug("qso_invalid_dropped", qso=qso.model_dump())
                continue
            tasks.append(self._spawn_forward(qso))
        return tasks

    def _spawn_forward(self, qso: QSO) -> asyncio.Task:
        task = asyncio.create_task(self._forward(qso))
        self._forwards.add(task)
        task.add_done_callback(self._forwards.discard)
        return task

    async def _forward(self, qso: QSO) -> None:
        try:
            status = await self._send(qso, self.settings)
        except Exception as e:
            # Every dispatched record reports exactly one status.
            detail = str(e) or type(e).__name__
            log_error("qso_forward_crashed", call=qso.call, error=detail)
            status = ForwardStatus.failure(StatusKind.NETWORK, detail)
        self.sink(RecordProcessed(qso=qso, status=status))

    async def drain(self) -> None:
        """Wait for every in-flight forward to finish."""
        if self._forwards:
            await asyncio.gather(*self._forwards, return_exceptions=True)
