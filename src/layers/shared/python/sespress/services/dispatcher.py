"""Mail dispatcher.

Turns a MailRequest into a single transport call, applying the configured
policy first:

1. Mails disabled: short-circuit with ``Failed(disabled)``
2. Sender, recipients and subject are sanitized and formatted
3. Test mode replaces every recipient with the configured test recipient
   and prefixes the subject
4. An optional template is rendered into the HTML part
5. One transport attempt; every outcome is returned as a DispatchResult
"""

from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from sespress.config import ConfigurationStore, get_configuration_store
from sespress.models.mail import MailAddress, MailRequest, TemplateReference
from sespress.models.result import DispatchResult, Failed, FailureReason, Sent
from sespress.models.settings import SesPressSettings
from sespress.services.templates import (
    FileTemplateResolver,
    PlaceholderTemplateRenderer,
    TemplateRenderer,
    TemplateResolver,
)
from sespress.services.transport import EmailTransport, SesTransport
from sespress.utils.exceptions import TransportError
from sespress.utils.sanitize import (
    format_address,
    sanitize_email,
    sanitize_text_field,
    sanitize_variable_name,
)

logger = structlog.get_logger()

TEST_MODE_SUBJECT_PREFIX = "Test - "


@dataclass
class OutgoingMail:
    """Normalized arguments for one transport call."""

    destination: list[str]
    subject: str
    html_body: str
    text_body: str
    source: str


class MailDispatcher:
    """Send transactional mail according to the SesPress settings.

    Example:
        dispatcher = MailDispatcher(store=MappingConfigurationStore({...}))
        result = dispatcher.send(MailRequest(...))
        if not result.success:
            logger.warning("Mail not sent", **result.to_dict())
    """

    def __init__(
        self,
        store: ConfigurationStore | None = None,
        transport: EmailTransport | None = None,
        template_resolver: TemplateResolver | None = None,
        template_renderer: TemplateRenderer | None = None,
        settings: SesPressSettings | None = None,
    ):
        """Initialize the dispatcher.

        Args:
            store: Settings source. Defaults to get_configuration_store().
            transport: Email transport. Defaults to an SesTransport built
                from the settings on first send.
            template_resolver: Template lookup. Defaults to FileTemplateResolver.
            template_renderer: Template rendering. Defaults to PlaceholderTemplateRenderer.
            settings: Pre-parsed settings; skips reading the store.
        """
        self.store = store
        self.template_resolver = template_resolver or FileTemplateResolver()
        self.template_renderer = template_renderer or PlaceholderTemplateRenderer()
        self._settings = settings
        self._transport = transport

        self.logger = logger.bind(service="mail_dispatcher")

    @property
    def settings(self) -> SesPressSettings:
        """Parsed settings (loaded once per dispatcher)."""
        if self._settings is None:
            if self.store is None:
                self.store = get_configuration_store()
            self._settings = SesPressSettings.from_store(self.store)
        return self._settings

    @property
    def transport(self) -> EmailTransport:
        """Email transport (lazy initialization)."""
        if self._transport is None:
            self._transport = SesTransport.from_settings(self.settings)
        return self._transport

    def send(self, request: MailRequest | dict[str, Any]) -> DispatchResult:
        """Send a mail request.

        Args:
            request: MailRequest, or a dict in the same shape.

        Returns:
            ``Sent`` with the provider message ID, or ``Failed`` with a reason.
            Never raises.
        """
        try:
            settings = self.settings
        except Exception as e:
            self.logger.exception("Failed to load mail settings", error=str(e))
            return Failed(FailureReason.TRANSPORT_ERROR, f"Failed to load settings: {e}")

        if not settings.enable_emails:
            self.logger.info("Mails disabled, not sending")
            return Failed(FailureReason.DISABLED, "Mails are disabled")

        if not isinstance(request, MailRequest):
            try:
                request = MailRequest.model_validate(request)
            except PydanticValidationError as e:
                self.logger.warning("Invalid mail request", errors=e.error_count())
                return Failed(FailureReason.VALIDATION_ERROR, f"Invalid mail request: {e}")

        errors: list[str] = []
        outgoing = self._normalize(request, settings, errors)
        if errors:
            detail = "; ".join(errors)
            self.logger.warning("Mail request failed validation", detail=detail)
            return Failed(FailureReason.VALIDATION_ERROR, detail)

        if not outgoing.html_body and not outgoing.text_body:
            self.logger.warning("Sending mail with empty body")

        return self._dispatch(outgoing, settings)

    def _normalize(
        self,
        request: MailRequest,
        settings: SesPressSettings,
        errors: list[str],
    ) -> OutgoingMail:
        """Build transport arguments from a request, collecting validation errors."""
        source = self._normalize_sender(request.sender, settings, errors)
        destination = self._normalize_recipients(request.recipients, settings, errors)

        subject = sanitize_text_field(request.subject)
        if settings.test_mode:
            subject = f"{TEST_MODE_SUBJECT_PREFIX}{subject}"

        html_body = request.body.html
        text_body = request.body.text

        if request.template is not None:
            rendered = self._render_template(request.template)
            if rendered is not None:
                html_body = rendered

        return OutgoingMail(
            destination=destination,
            subject=subject,
            html_body=html_body or "",
            text_body=text_body or "",
            source=source,
        )

    def _normalize_sender(
        self,
        sender: MailAddress | None,
        settings: SesPressSettings,
        errors: list[str],
    ) -> str:
        if sender is None:
            name, email = settings.default_sender_name, settings.default_sender_email
            if not email:
                errors.append("No sender given and no valid default sender configured")
                return ""
        else:
            name, email = sender.name, sender.email
            if not sanitize_email(email):
                errors.append("Invalid sender email")
                return ""
        return format_address(name, email)

    def _normalize_recipients(
        self,
        recipients: list[MailAddress],
        settings: SesPressSettings,
        errors: list[str],
    ) -> list[str]:
        if settings.test_mode:
            # Production recipients never receive test-mode mail
            if not settings.test_mode_recipient_email:
                errors.append("Test mode is on but no valid test recipient is configured")
                return []
            return [
                format_address(
                    settings.test_mode_recipient_name,
                    settings.test_mode_recipient_email,
                )
            ]

        if not recipients:
            errors.append("At least one recipient is required")
            return []

        destination = []
        for position, recipient in enumerate(recipients):
            if not sanitize_email(recipient.email):
                errors.append(f"Invalid recipient email at position {position}")
                continue
            destination.append(format_address(recipient.name, recipient.email))
        return destination

    def _render_template(self, template: TemplateReference) -> str | None:
        """Render a template reference, or None if it cannot be rendered."""
        name = sanitize_text_field(template.path)
        try:
            path = self.template_resolver.resolve(name)
        except Exception as e:
            self.logger.warning("Mail template lookup failed", template=name[:100], error=str(e))
            return None
        if path is None:
            self.logger.warning("Mail template not found", template=name)
            return None

        variables = {
            sanitize_variable_name(key): sanitize_text_field(value)
            for key, value in template.variables.items()
        }

        try:
            return self.template_renderer.render(path, variables)
        except Exception as e:
            self.logger.warning("Mail template rendering failed", template=name, error=str(e))
            return None

    def _dispatch(self, outgoing: OutgoingMail, settings: SesPressSettings) -> DispatchResult:
        subject = outgoing.subject
        self.logger.info(
            "Sending mail",
            recipient_count=len(outgoing.destination),
            subject=subject[:50] + "..." if len(subject) > 50 else subject,
            has_html=bool(outgoing.html_body),
            test_mode=settings.test_mode,
        )

        try:
            message_id = self.transport.send_email(
                destination=outgoing.destination,
                subject=outgoing.subject,
                html_body=outgoing.html_body,
                text_body=outgoing.text_body,
                source=outgoing.source,
            )
        except TransportError as e:
            self.logger.error("Mail transport error", error_code=e.code, error_message=e.message)
            return Failed(FailureReason.TRANSPORT_ERROR, e.message, code=e.code)
        except Exception as e:
            self.logger.exception("Unexpected error sending mail", error=str(e))
            return Failed(FailureReason.TRANSPORT_ERROR, str(e))

        self.logger.info("Mail sent", message_id=message_id)
        return Sent(message_id)


def get_mail_dispatcher(store: ConfigurationStore | None = None) -> MailDispatcher:
    """Factory function to get a MailDispatcher instance.

    Args:
        store: Optional settings source override.

    Returns:
        MailDispatcher reading settings from the configured store.
    """
    return MailDispatcher(store=store if store is not None else get_configuration_store())
