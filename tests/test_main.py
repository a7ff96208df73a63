"""Tests for the status API."""

import asyncio
import time

from fastapi.testclient import TestClient

from wavegate.errors import BindError
from wavegate.gateway import Gateway
from wavegate.main import create_app
from wavegate.models import ForwardStatus

DATAGRAM = b"<CALL:4>W1AW<QSO_DATE:8>20240101<TIME_ON:4>1200<BAND:3>20m<MODE:3>FT8<EOR>"


def gateway_with(*datagrams, status=None):
    """Build a gateway factory fed from memory instead of a UDP socket."""
    queue = list(datagrams)

    async def listen(host, port):
        if queue:
            return queue.pop(0)
        await asyncio.Event().wait()

    async def send(qso, settings):
        return status or ForwardStatus.success("created")

    def factory(settings, sink):
        return Gateway(settings, sink, listen=listen, send=send)

    return factory


def poll(client, path, predicate, headers=None, timeout=2.0):
    deadline = time.monotonic() + timeout
    while True:
        body = client.get(path, headers=headers).json()
        if predicate(body) or time.monotonic() > deadline:
            return body
        time.sleep(0.01)


class TestStatusApi:
    def test_root_and_health(self, settings):
        app = create_app(settings=settings, gateway_factory=gateway_with())
        with TestClient(app) as client:
            assert client.get("/health").json() == {"ok": True}
            root = client.get("/").json()
            assert root["service"] == "Wavelog Gate"
            assert root["status"] == "/api/status"

    def test_status_reports_listen_info(self, settings):
        app = create_app(settings=settings, gateway_factory=gateway_with())
        with TestClient(app) as client:
            body = poll(client, "/api/status", lambda b: b["status_message"] == "Ready")

        assert body["listen_info"] == "Listen: 127.0.0.1:2333 | Wavelog: https://wavelog.test/index.php"
        assert body["running"] is True
        assert body["records"] == 0

    def test_processed_qsos_are_listed(self, settings):
        app = create_app(settings=settings, gateway_factory=gateway_with(DATAGRAM))
        with TestClient(app) as client:
            body = poll(client, "/api/qsos", lambda b: b["records"])
            status = client.get("/api/status").json()

        assert len(body["records"]) == 1
        row = body["records"][0]
        assert row["qso"]["call"] == "W1AW"
        assert row["qso"]["mode"] == "FT8"
        assert row["status"] == "OK"
        assert row["detail"] == "created"
        assert status["status_message"] == "QSO processed"

    def test_limit_is_validated(self, settings):
        app = create_app(settings=settings, gateway_factory=gateway_with())
        with TestClient(app) as client:
            assert client.get("/api/qsos?limit=0").status_code == 422
            assert client.get("/api/qsos?limit=501").status_code == 422

    def test_api_key_required_when_configured(self, settings, monkeypatch):
        monkeypatch.setenv("WAVEGATE_API_KEY", "s3cret")
        app = create_app(settings=settings, gateway_factory=gateway_with())
        with TestClient(app) as client:
            assert client.get("/api/qsos").status_code == 401
            assert client.get("/api/qsos", headers={"x-api-key": "nope"}).status_code == 401
            assert client.get("/api/qsos", headers={"x-api-key": "s3cret"}).status_code == 200
            assert client.get("/api/status").status_code == 200

    def test_config_failure_is_reported(self, tmp_path):
        app = create_app(config_path=str(tmp_path / "config.toml"))
        with TestClient(app) as client:
            body = client.get("/api/status").json()

        assert body["status_message"].startswith("Config load failed: Missing configuration file")
        assert body["running"] is False
        assert body["listen_info"] == ""

    def test_bind_failure_is_reported(self, settings):
        async def listen(host, port):
            raise BindError(f"{host}:{port}", OSError(98, "Address already in use"))

        def factory(cfg, sink):
            return Gateway(cfg, sink, listen=listen)

        app = create_app(settings=settings, gateway_factory=factory)
        with TestClient(app) as client:
            body = poll(client, "/api/status", lambda b: b["status_message"].startswith("Listener failed"))

        assert body["status_message"].startswith("Listener failed: Failed to bind to address 127.0.0.1:2333")
        assert body["running"] is False
