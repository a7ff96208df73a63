"""Pydantic model describing the outcome of one forward attempt."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class StatusKind(str, Enum):
    """Classification of a forward outcome."""

    SUCCESS = "success"
    REJECTED = "rejected"
    WRONG_ENDPOINT = "wrong_endpoint"
    NETWORK = "network"


class ForwardStatus(BaseModel):
    """Result of posting one QSO to Wavelog.

    On success ``detail`` is the response body exactly as received.  On
    failure it is a human-readable description of what went wrong.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    kind: StatusKind
    detail: str = ""

    @classmethod
    def success(cls, body: str) -> "ForwardStatus":
        return cls(ok=True, kind=StatusKind.SUCCESS, detail=body)

    @classmethod
    def failure(cls, kind: StatusKind, detail: str) -> "ForwardStatus":
        return cls(ok=False, kind=kind, detail=detail)

    @property
    def display(self) -> str:
        """Short status label: ``OK`` or ``Error``."""
        return "OK" if self.ok else "Error"
