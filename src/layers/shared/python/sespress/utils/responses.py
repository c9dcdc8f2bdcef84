"""API response helper functions."""

import json
import os
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel as PydanticBaseModel

_ALLOWED_ORIGIN = os.environ.get("CORS_ALLOWED_ORIGIN", "*")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": _ALLOWED_ORIGIN,
    "Access-Control-Allow-Headers": "Content-Type,Authorization,X-Amz-Date,X-Api-Key,X-Amz-Security-Token",
    "Access-Control-Allow-Methods": "GET,POST,PUT,OPTIONS",
    "Content-Type": "application/json",
}


def _json_serializer(obj: Any) -> Any:
    """JSON serializer for objects not serializable by default."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, PydanticBaseModel):
        return obj.model_dump(mode="json")
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def _serialize(data: Any) -> str:
    """Serialize data to JSON string."""
    return json.dumps(data, default=_json_serializer)


def success(data: Any, status_code: int = 200) -> dict:
    """Create a successful API response.

    Args:
        data: Response data (dict, list, or Pydantic model).
        status_code: HTTP status code (default 200).

    Returns:
        API Gateway response dict.
    """
    if isinstance(data, PydanticBaseModel):
        body = data.model_dump(mode="json")
    else:
        body = data

    return {
        "statusCode": status_code,
        "headers": CORS_HEADERS,
        "body": _serialize(body),
    }


def error(
    message: str,
    status_code: int = 500,
    error_code: str | None = None,
    details: dict | None = None,
) -> dict:
    """Create an error API response.

    Args:
        message: Error message.
        status_code: HTTP status code.
        error_code: Machine-readable error code.
        details: Additional error details.

    Returns:
        API Gateway response dict.
    """
    body: dict[str, Any] = {
        "error": True,
        "message": message,
    }

    if error_code:
        body["error_code"] = error_code
    if details:
        body["details"] = details

    return {
        "statusCode": status_code,
        "headers": CORS_HEADERS,
        "body": _serialize(body),
    }


def validation_error(errors: list[dict]) -> dict:
    """Create a validation error response."""
    return error(
        message="Validation failed",
        status_code=400,
        error_code="VALIDATION_ERROR",
        details={"errors": errors},
    )


def unauthorized(message: str = "Authentication required") -> dict:
    """Create a 401 Unauthorized response."""
    return error(
        message=message,
        status_code=401,
        error_code="UNAUTHORIZED",
    )


def forbidden(message: str = "You don't have permission to perform this action") -> dict:
    """Create a 403 Forbidden response."""
    return error(
        message=message,
        status_code=403,
        error_code="FORBIDDEN",
    )
