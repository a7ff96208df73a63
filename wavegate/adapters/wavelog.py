"""Wavelog adapter posting single QSOs to the ``/api/qso`` endpoint."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from wavegate import __version__
from wavegate.adif import to_adif
from wavegate.middleware.logging import log_info, log_warning
from wavegate.models import QSO, ForwardStatus, StatusKind
from wavegate.settings import Settings

TIMEOUT = 5.0
USER_AGENT = f"WavelogGate_v{__version__}"
WRONG_URL = "Wrong URL"


def build_payload(qso: QSO, settings: Settings) -> Dict[str, Any]:
    """Return the JSON body Wavelog expects for one ADIF record."""
    return {
        "key": settings.wavelog.key.strip(),
        "station_profile_id": settings.wavelog.station.strip(),
        "type": "adif",
        "string": to_adif(qso),
    }


def classify_response(status_code: int, body: str) -> ForwardStatus:
    """Map an HTTP response onto a :class:`ForwardStatus`.

    A failing response with an HTML body means we reached a web page rather
    than the API, which almost always points at a wrong base URL.
    """
    if 200 <= status_code < 300:
        return ForwardStatus.success(body)
    if "html>" in body:
        return ForwardStatus.failure(StatusKind.WRONG_ENDPOINT, WRONG_URL)
    return ForwardStatus.failure(StatusKind.REJECTED, body)


async def send_qso(
    qso: QSO,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ForwardStatus:
    """Post one QSO to Wavelog and classify the outcome.

    Exactly one attempt is made.  Transport failures are reported as a
    ``network`` status rather than raised.  Certificate verification is
    disabled because many Wavelog installs run on self-signed certificates.
    """
    url = f"{settings.wavelog.url}/api/qso"
    headers = {"Content-Type": "application/json", "User-Agent": USER_AGENT}
    try:
        async with httpx.AsyncClient(
            timeout=TIMEOUT, verify=False, transport=transport
        ) as client:
            r = await client.post(url, json=build_payload(qso, settings), headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        detail = str(e) or type(e).__name__
        log_warning("qso_forward_failed", call=qso.call, url=url, kind="network", error=detail)
        return ForwardStatus.failure(StatusKind.NETWORK, detail)

    status = classify_response(r.status_code, r.text)
    if status.ok:
        log_info("qso_forwarded", call=qso.call, url=url, status_code=r.status_code)
    else:
        log_warning(
            "qso_forward_failed",
            call=qso.call,
            url=url,
            kind=status.kind.value,
            status_code=r.status_code,
            error=status.detail,
        )
    return status
