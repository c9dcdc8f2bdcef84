"""Utility functions and helpers."""

from sespress.utils.exceptions import (
    ForbiddenError,
    SesPressError,
    TemplateError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from sespress.utils.sanitize import (
    format_address,
    sanitize_email,
    sanitize_name,
    sanitize_text_field,
    sanitize_variable_name,
)

__all__ = [
    # Exceptions
    "SesPressError",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "TransportError",
    "TemplateError",
    # Sanitizers
    "format_address",
    "sanitize_email",
    "sanitize_name",
    "sanitize_text_field",
    "sanitize_variable_name",
]
