"""Tests for the command line entry point."""

import pytest

from wavegate import __main__ as cli
from wavegate.errors import BindError
from wavegate.models import QSO, ForwardStatus, ListenerReady, RecordProcessed


class TestCli:
    def test_defaults(self):
        args = cli.parse_args([])

        assert args.config is None
        assert args.headless is False
        assert args.http_host == "127.0.0.1"
        assert args.http_port == 8233

    def test_missing_config_exits_with_2(self, tmp_path, capsys):
        code = cli.main(["--config", str(tmp_path / "config.toml"), "--headless"])

        assert code == 2
        assert "Configuration loading failed" in capsys.readouterr().err

    def test_headless_bind_error_exits_with_1(self, tmp_path, monkeypatch, capsys):
        config = tmp_path / "config.toml"
        config.write_text('[wavelog]\nurl = "https://x"\nkey = "k"\nstation = "1"\n')

        async def broken_run(settings):
            raise BindError("0.0.0.0:2333", OSError(98, "Address already in use"))

        monkeypatch.setattr(cli, "run_headless", broken_run)

        assert cli.main(["--config", str(config), "--headless"]) == 1
        assert "Failed to bind to address 0.0.0.0:2333" in capsys.readouterr().err

    def test_serves_status_api(self, tmp_path, monkeypatch):
        config = tmp_path / "config.toml"
        config.write_text('[wavelog]\nurl = "https://x"\nkey = "k"\nstation = "1"\n')
        served = {}

        def fake_run(app, host, port, log_level):
            served.update(app=app, host=host, port=port, log_level=log_level)

        monkeypatch.setattr(cli.uvicorn, "run", fake_run)

        assert cli.main(["--config", str(config), "--http-port", "9000", "--log-level", "debug"]) == 0
        assert served["port"] == 9000
        assert served["log_level"] == "debug"
        assert served["app"].title == "Wavelog Gate"

    @pytest.mark.parametrize(
        "event",
        [
            ListenerReady(host="0.0.0.0", port=2333, url="https://x"),
            RecordProcessed(qso=QSO(call="W1AW"), status=ForwardStatus.success("created")),
        ],
    )
    def test_log_sink_accepts_events(self, event):
        cli.log_sink(event)
