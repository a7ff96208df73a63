"""ADIF tag stream codec.

Only the subset of ADIF that loggers send over UDP is handled: a flat
sequence of ``<NAME[:length[:type]]>value`` tags, grouped into records by
``<EOR>`` and optionally preceded by a header closed with ``<EOH>``.
"""

from __future__ import annotations

import re
from typing import Dict, List

from wavegate.models import QSO, QSO_FIELDS

# The declared length is ignored when decoding; a value runs to the next "<".
_TAG_RE = re.compile(r"<([a-z][a-z0-9_]*)(?::(\d+))?(?::([a-z]+))?>([^<]*)", re.IGNORECASE)


def parse_adif(text: str) -> List[QSO]:
    """Decode an ADIF tag stream into QSO records.

    Never raises.  Tags before ``<EOH>`` are discarded and fields without a
    closing ``<EOR>`` are dropped.  Unknown tags are collected along with
    the rest and filtered out when the record is built.
    """
    qsos: List[QSO] = []
    current: Dict[str, str] = {}
    for match in _TAG_RE.finditer(text):
        name = match.group(1).upper()
        if name == "EOR":
            qsos.append(QSO.from_fields(current))
            current.clear()
            continue
        if name == "EOH":
            current.clear()
            continue
        current[name.lower()] = match.group(4).strip()
    return qsos


def to_adif(qso: QSO) -> str:
    """Encode one QSO as ADIF, terminated by ``<EOR>`` and CRLF.

    Values are written as-is; a value containing ``<`` will not survive a
    later :func:`parse_adif`.
    """
    parts = []
    for name in QSO_FIELDS:
        value = getattr(qso, name)
        if value:
            parts.append(f"<{name.upper()}:{len(value.encode('utf-8'))}>{value}")
    parts.append("<EOR>\r\n")
    return "".join(parts)
