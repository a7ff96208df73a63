"""UDP listener for ADIF datagrams sent by logging software.

Each call binds a fresh socket, waits for a single datagram and closes the
socket again.  The gateway starts a new listen cycle for every datagram,
which keeps compatibility with setups that rely on the port being released
between packets.
"""

from __future__ import annotations

import asyncio
import socket

from wavegate.errors import BindError
from wavegate.middleware.logging import log_debug, log_error, log_warning

BUFFER_SIZE = 4096
RETRY_DELAY = 0.1


def _bind(host: str, port: int) -> socket.socket:
    """Create a non-blocking UDP socket bound to ``host:port``."""
    address = f"{host}:{port}"
    try:
        family, type_, proto, _, sockaddr = socket.getaddrinfo(
            host, port, type=socket.SOCK_DGRAM
        )[0]
        sock = socket.socket(family, type_, proto)
    except OSError as e:
        log_error("udp_bind_error", address=address, error=str(e))
        raise BindError(address, e) from e
    try:
        sock.setblocking(False)
        sock.bind(sockaddr)
    except OSError as e:
        sock.close()
        log_error("udp_bind_error", address=address, error=str(e))
        raise BindError(address, e) from e
    return sock


async def listen_once(host: str, port: int, bufsize: int = BUFFER_SIZE) -> bytes:
    """Bind ``host:port`` and return the payload of the first datagram.

    Raises :class:`BindError` when the address cannot be bound.  Receive
    errors on the bound socket are logged and retried; empty datagrams are
    ignored.  Payloads longer than ``bufsize`` are truncated.
    """
    loop = asyncio.get_running_loop()
    sock = _bind(host, port)
    try:
        while True:
            try:
                data, src = await loop.sock_recvfrom(sock, bufsize)
            except OSError as e:
                log_warning("udp_receive_error", host=host, port=port, error=str(e))
                await asyncio.sleep(RETRY_DELAY)
                continue
            if data:
                log_debug("udp_datagram_received", source=src, size=len(data))
                return data
    finally:
        sock.close()


class UdpListener:
    """Listener bound to one address, usable for a single receive cycle."""

    def __init__(self, host: str, port: int, bufsize: int = BUFFER_SIZE) -> None:
        self.host = host
        self.port = port
        self.bufsize = bufsize

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    async def listen_once(self) -> bytes:
        return await listen_once(self.host, self.port, self.bufsize)
