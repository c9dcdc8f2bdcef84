"""Sanitizers for untrusted strings coming from settings and callers."""

import html as html_module
import re
from email.utils import formataddr
from typing import Any

from email_validator import EmailNotValidError, validate_email

_SCRIPT_STYLE_RE = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_OCTET_RE = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE_RE = re.compile(r"\s+")


def _strip_text(value: Any) -> str:
    """Remove tags, percent-encoded octets and extra whitespace."""
    if value is None:
        return ""
    text = str(value)
    text = _SCRIPT_STYLE_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    text = _OCTET_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def sanitize_text_field(value: Any) -> str:
    """Sanitize a single-line text value.

    Strips HTML tags (including script/style bodies), percent-encoded
    octets, line breaks and repeated whitespace. A stray ``<`` that is not
    part of a tag is encoded as ``&lt;``.

    Args:
        value: Untrusted value. ``None`` becomes an empty string.

    Returns:
        Sanitized single-line string.
    """
    return _strip_text(value).replace("<", "&lt;")


def sanitize_name(value: Any) -> str:
    """Sanitize a display name and HTML-escape it.

    Existing entities are decoded first so sanitizing twice gives the same
    result as sanitizing once.
    """
    return html_module.escape(html_module.unescape(_strip_text(value)), quote=False)


def sanitize_email(value: Any) -> str:
    """Validate and normalize an email address.

    Args:
        value: Untrusted address.

    Returns:
        The normalized address, or an empty string if it is not a
        syntactically valid address.
    """
    if value is None:
        return ""
    candidate = str(value).strip()
    if not candidate:
        return ""
    try:
        result = validate_email(candidate, check_deliverability=False)
    except EmailNotValidError:
        return ""
    return result.normalized


def sanitize_variable_name(name: Any) -> str:
    """Normalize a template variable name: sanitized, whitespace runs become ``_``."""
    return _WHITESPACE_RE.sub("_", sanitize_text_field(name).strip())


def format_address(name: Any, email: Any) -> str:
    """Format a mailbox as ``Name <email>``.

    Names containing RFC 5322 specials are quoted. The bare address is
    returned when the name sanitizes to an empty string.
    """
    return formataddr((sanitize_name(name), sanitize_email(email)))
