"""Pydantic models and result types for SesPress."""

from sespress.models.mail import MailAddress, MailBody, MailRequest, TemplateReference
from sespress.models.result import DispatchResult, Failed, FailureReason, Sent
from sespress.models.settings import (
    OPTION_NAMES,
    REQUIRED_OPTIONS,
    SesPressSettings,
    SettingsUpdate,
)

__all__ = [
    # Mail
    "MailAddress",
    "MailBody",
    "MailRequest",
    "TemplateReference",
    # Results
    "DispatchResult",
    "Failed",
    "FailureReason",
    "Sent",
    # Settings
    "OPTION_NAMES",
    "REQUIRED_OPTIONS",
    "SesPressSettings",
    "SettingsUpdate",
]
