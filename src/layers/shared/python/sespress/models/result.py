"""Dispatch result types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FailureReason(str, Enum):
    """Why a dispatch did not result in a sent message."""

    DISABLED = "disabled"
    TRANSPORT_ERROR = "transport_error"
    VALIDATION_ERROR = "validation_error"


@dataclass(frozen=True)
class Sent:
    """The provider accepted the message."""

    message_id: str

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "message_id": self.message_id}


@dataclass(frozen=True)
class Failed:
    """The message was not sent."""

    reason: FailureReason
    detail: str = ""
    code: str | None = None  # provider error code, transport errors only

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "success": False,
            "reason": self.reason.value,
            "detail": self.detail,
        }
        if self.code:
            result["code"] = self.code
        return result


DispatchResult = Sent | Failed
