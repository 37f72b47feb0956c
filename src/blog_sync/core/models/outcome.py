"""Structured outcomes returned to the presentation layer."""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class OutcomeKind(str, Enum):
    """What the user should do about an outcome."""

    OK = "ok"
    INVALID_INPUT = "invalid_input"  # fix your input
    RETRY = "retry"  # try again
    REPAIR = "repair"  # reinitialize the repository
    BUSY = "busy"  # another sync is running
    OPERATOR = "operator"  # contact the operator


class Outcome(BaseModel):
    """Result of a caller-facing operation."""

    ok: bool
    kind: OutcomeKind
    message: str = ""
    data: Any = None

    @classmethod
    def success(cls, data: Any = None, message: str = "") -> "Outcome":
        return cls(ok=True, kind=OutcomeKind.OK, message=message, data=data)

    @classmethod
    def failure(cls, kind: OutcomeKind, message: str) -> "Outcome":
        return cls(ok=False, kind=kind, message=message)
