"""Tests for string sanitizers."""

import pytest

from sespress.utils.sanitize import (
    format_address,
    sanitize_email,
    sanitize_name,
    sanitize_text_field,
    sanitize_variable_name,
)


class TestSanitizeTextField:
    """Tests for single-line text sanitizing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("  Hello  ", "Hello"),
            ("line one\nline two\ttab", "line one line two tab"),
            ("<b>bold</b> text", "bold text"),
            ("<script>alert(1)</script>safe", "safe"),
            ("<style>p{}</style>styled", "styled"),
            ("100%20off", "100off"),
            ("a < b", "a &lt; b"),
            (None, ""),
            (42, "42"),
        ],
    )
    def test_sanitize(self, raw, expected):
        """Test tag, whitespace and octet handling."""
        assert sanitize_text_field(raw) == expected


class TestSanitizeName:
    """Tests for display-name sanitizing."""

    def test_escapes_html(self):
        """Test that ampersands are escaped."""
        assert sanitize_name("Tom & Jerry") == "Tom &amp; Jerry"

    def test_idempotent(self):
        """Test that sanitizing twice does not double-escape."""
        once = sanitize_name("Tom & Jerry")
        assert sanitize_name(once) == once


class TestSanitizeEmail:
    """Tests for email validation."""

    def test_valid_address_trimmed(self):
        """Test that surrounding whitespace is removed."""
        assert sanitize_email("  alice@example.com ") == "alice@example.com"

    def test_domain_normalized(self):
        """Test that the domain part is lowercased."""
        assert sanitize_email("Alice@Example.COM") == "Alice@example.com"

    @pytest.mark.parametrize("raw", ["", None, "alice", "alice@", "@x.com", "a b@x.com", "alice@@x.com"])
    def test_invalid_address_is_empty(self, raw):
        """Test that invalid addresses sanitize to an empty string."""
        assert sanitize_email(raw) == ""


class TestFormatting:
    """Tests for address formatting and variable names."""

    def test_format_address(self):
        """Test the Name <email> format."""
        assert format_address(" Alice ", "alice@x.com") == "Alice <alice@x.com>"

    def test_format_address_without_name(self):
        """Test that an empty name gives the bare address."""
        assert format_address("", "alice@x.com") == "alice@x.com"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Doe, John", '"Doe, John" <john@x.com>'),
            ("J. Doe", '"J. Doe" <john@x.com>'),
            ("Dr (Who)", '"Dr (Who)" <john@x.com>'),
            ("a@b", '"a@b" <john@x.com>'),
        ],
    )
    def test_format_address_quotes_specials(self, name, expected):
        """Test that names with commas, dots, parens or at-signs are quoted."""
        assert format_address(name, "john@x.com") == expected

    def test_variable_name_whitespace(self):
        """Test that whitespace runs become underscores."""
        assert sanitize_variable_name("  first   name ") == "first_name"
