"""Shared fixtures for the gateway tests."""

import pytest

from wavegate.models import QSO
from wavegate.settings import ServerSettings, Settings, WavelogSettings


@pytest.fixture
def settings():
    return Settings(
        wavelog=WavelogSettings(
            url="https://wavelog.test/index.php",
            key=" wl-secret ",
            station="3",
        ),
        server=ServerSettings(host="127.0.0.1", port=2333),
    )


@pytest.fixture
def qso():
    return QSO(
        call="W1AW",
        gridsquare="FN31",
        mode="FT8",
        rst_sent="-10",
        rst_rcvd="-12",
        qso_date="20240101",
        time_on="1200",
        band="20m",
        freq="14.074",
        station_callsign="DL1ABC",
    )
