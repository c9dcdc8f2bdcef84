"""SesPress settings models.

Raw settings are untrusted strings. They are parsed into typed, sanitized
values once, when loaded from a configuration store.
"""

from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from sespress.utils.sanitize import sanitize_email, sanitize_name, sanitize_text_field

if TYPE_CHECKING:
    from sespress.config import ConfigurationStore

OPTION_NAMES: tuple[str, ...] = (
    "region",
    "default_sender_name",
    "default_sender_email",
    "enable_emails",
    "aws_access_key_id",
    "aws_secret_access_key",
    "test_mode",
    "test_mode_recipient_name",
    "test_mode_recipient_email",
)

# Options without which no mail can be sent
REQUIRED_OPTIONS: tuple[str, ...] = (
    "region",
    "default_sender_name",
    "default_sender_email",
    "aws_access_key_id",
    "aws_secret_access_key",
)

FLAG_OPTIONS: frozenset[str] = frozenset({"enable_emails", "test_mode"})
NAME_OPTIONS: frozenset[str] = frozenset({"default_sender_name", "test_mode_recipient_name"})
EMAIL_OPTIONS: frozenset[str] = frozenset({"default_sender_email", "test_mode_recipient_email"})
SECRET_OPTIONS: frozenset[str] = frozenset({"aws_secret_access_key"})

_TRUTHY = frozenset({"on", "true", "1", "yes"})


def parse_flag(value: Any) -> bool:
    """Parse a stored on/off flag."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUTHY


def _clean_option(name: str, value: Any) -> Any:
    if name in FLAG_OPTIONS:
        return parse_flag(value)
    if name in NAME_OPTIONS:
        return sanitize_name(value)
    if name in EMAIL_OPTIONS:
        return sanitize_email(value)
    return sanitize_text_field(value)


class SesPressSettings(BaseModel):
    """Typed, sanitized view of the mail settings."""

    model_config = ConfigDict(frozen=True)

    region: str = ""
    default_sender_name: str = ""
    default_sender_email: str = ""
    enable_emails: bool = False
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    test_mode: bool = False
    test_mode_recipient_name: str = ""
    test_mode_recipient_email: str = ""

    @classmethod
    def from_store(cls, store: "ConfigurationStore") -> Self:
        """Load and sanitize every option from a configuration store."""
        return cls(**{name: _clean_option(name, store.get(name)) for name in OPTION_NAMES})

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> Self:
        """Build settings from a plain mapping of raw option values."""
        return cls(**{name: _clean_option(name, values.get(name)) for name in OPTION_NAMES})

    def missing_options(self) -> list[str]:
        """Required options that are empty or failed sanitization."""
        return [name for name in REQUIRED_OPTIONS if not getattr(self, name)]

    @property
    def is_complete(self) -> bool:
        return not self.missing_options()

    def to_public_dict(self) -> dict[str, Any]:
        """Settings safe to return over the API (secrets masked)."""
        data = self.model_dump()
        for name in SECRET_OPTIONS:
            if data.get(name):
                data[name] = "********"
        return data


class SettingsUpdate(BaseModel):
    """Partial update of stored settings, as sent by the settings API."""

    model_config = ConfigDict(extra="forbid")

    region: str | None = Field(None, max_length=32)
    default_sender_name: str | None = Field(None, max_length=200)
    default_sender_email: EmailStr | None = None
    enable_emails: bool | None = None
    aws_access_key_id: str | None = Field(None, max_length=128)
    aws_secret_access_key: str | None = Field(None, max_length=256)
    test_mode: bool | None = None
    test_mode_recipient_name: str | None = Field(None, max_length=200)
    test_mode_recipient_email: EmailStr | None = None

    @field_validator("region", "aws_access_key_id", "aws_secret_access_key")
    @classmethod
    def strip_value(cls, v: str | None) -> str | None:
        """Trim whitespace from identifier-like values."""
        return v.strip() if v is not None else v

    def to_store_values(self) -> dict[str, str]:
        """Values to persist, with flags stored as ``on``/``off``."""
        values: dict[str, str] = {}
        for name, value in self.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            if name in FLAG_OPTIONS:
                values[name] = "on" if value else "off"
            else:
                values[name] = str(value)
        return values
