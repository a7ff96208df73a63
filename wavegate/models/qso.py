"""Pydantic model for a single logged contact (QSO).

The field set mirrors the ADIF tags Wavelog needs to create a log entry.
Declaration order is the canonical order used when encoding a record back
into ADIF.  Every field is an opaque string; numeric-looking values such as
``freq`` or ``power`` are never converted.
"""

from __future__ import annotations

from typing import Mapping, Tuple

from pydantic import BaseModel, ConfigDict


class QSO(BaseModel):
    """One amateur radio contact, immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    call: str = ""
    gridsquare: str = ""
    mode: str = ""
    submode: str = ""
    rst_sent: str = ""
    rst_rcvd: str = ""
    qso_date: str = ""
    time_on: str = ""
    qso_date_off: str = ""
    time_off: str = ""
    band: str = ""
    freq: str = ""
    freq_rx: str = ""
    operator: str = ""
    comment: str = ""
    power: str = ""
    my_gridsquare: str = ""
    station_callsign: str = ""

    @classmethod
    def from_fields(cls, fields: Mapping[str, str]) -> "QSO":
        """Build a QSO from lower-case tag names, ignoring unknown tags."""
        known = {name: fields[name] for name in QSO_FIELDS if name in fields}
        return cls(**known)

    @property
    def is_valid(self) -> bool:
        """True when the record carries everything Wavelog requires."""
        return bool(self.call and self.qso_date and self.time_on and self.band)


QSO_FIELDS: Tuple[str, ...] = tuple(QSO.model_fields)
