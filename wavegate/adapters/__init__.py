"""Adapter exports."""

from .udp import UdpListener, listen_once
from .wavelog import build_payload, classify_response, send_qso

__all__ = [
    "UdpListener",
    "listen_once",
    "send_qso",
    "build_payload",
    "classify_response",
]
