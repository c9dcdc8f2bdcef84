"""Settings API handler for SesPress.

Admin-only endpoints to inspect and update the stored mail settings and to
send a test email with them.
"""

import json
from typing import Any

import structlog
from pydantic import BaseModel, EmailStr, Field
from pydantic import ValidationError as PydanticValidationError

from sespress.models.mail import MailAddress, MailBody, MailRequest
from sespress.models.result import FailureReason, Sent
from sespress.models.settings import SesPressSettings, SettingsUpdate
from sespress.repositories.settings import SettingsRepository
from sespress.services.dispatcher import get_mail_dispatcher
from sespress.utils.auth import get_auth_context, require_admin
from sespress.utils.exceptions import ForbiddenError, UnauthorizedError, ValidationError
from sespress.utils.responses import error, forbidden, success, unauthorized, validation_error

logger = structlog.get_logger()

FAILURE_STATUS_CODES = {
    FailureReason.DISABLED: 409,
    FailureReason.VALIDATION_ERROR: 400,
    FailureReason.TRANSPORT_ERROR: 502,
}


class SendTestEmailBody(BaseModel):
    """Body of POST /settings/test-email."""

    name: str = Field("", max_length=200)
    email: EmailStr
    subject: str = Field("SesPress test email", max_length=200)


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle settings API requests.

    Routes:
        GET  /settings - Get settings and configuration status
        PUT  /settings - Update settings
        POST /settings/test-email - Send a test email
    """
    try:
        http_method = (event.get("httpMethod") or "").upper()
        path = event.get("path") or ""

        auth = get_auth_context(event)
        require_admin(auth)

        repo = SettingsRepository()

        if path == "/settings" and http_method == "GET":
            return get_settings(repo)
        elif path == "/settings" and http_method == "PUT":
            return update_settings(repo, event)
        elif path == "/settings/test-email" and http_method == "POST":
            return send_test_email(repo, event)
        else:
            return error("Not found", 404)

    except UnauthorizedError as e:
        return unauthorized(e.message)
    except ForbiddenError as e:
        return forbidden(e.message)
    except ValidationError as e:
        return validation_error(e.errors)
    except Exception as e:
        logger.exception("Settings handler error", error=str(e))
        return error("Internal server error", 500)


def _settings_response(settings: SesPressSettings) -> dict:
    missing = settings.missing_options()
    return {
        "settings": settings.to_public_dict(),
        "configuration_complete": not missing,
        "missing_options": missing,
    }


def _parse_body(event: dict) -> dict:
    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        raise ValidationError(errors=[{"field": "body", "message": "Invalid JSON"}])
    if not isinstance(body, dict):
        raise ValidationError(errors=[{"field": "body", "message": "Expected a JSON object"}])
    return body


def get_settings(repo: SettingsRepository) -> dict:
    """Return stored settings with the secret masked."""
    settings = SesPressSettings.from_store(repo)
    if not settings.is_complete:
        logger.info("SesPress configuration incomplete", missing=settings.missing_options())
    return success(_settings_response(settings))


def update_settings(repo: SettingsRepository, event: dict) -> dict:
    """Validate and save a partial settings update."""
    body = _parse_body(event)

    try:
        update = SettingsUpdate.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e)

    values = update.to_store_values()
    if not values:
        raise ValidationError(errors=[{"field": "body", "message": "No settings to update"}])

    stored = repo.save(values)

    logger.info("Settings updated", options=sorted(values))

    return success(_settings_response(SesPressSettings.from_mapping(stored)))


def send_test_email(repo: SettingsRepository, event: dict) -> dict:
    """Send a test email with the stored settings."""
    body = _parse_body(event)

    try:
        request = SendTestEmailBody.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e)

    dispatcher = get_mail_dispatcher(store=repo)
    result = dispatcher.send(
        MailRequest(
            subject=request.subject,
            recipients=[MailAddress(name=request.name, email=request.email)],
            body=MailBody(
                html="<p>This is a test email sent by SesPress.</p>",
                text="This is a test email sent by SesPress.",
            ),
        )
    )

    if isinstance(result, Sent):
        return success(result.to_dict())

    return error(
        result.detail or "Mail not sent",
        status_code=FAILURE_STATUS_CODES[result.reason],
        error_code=result.reason.value.upper(),
        details=result.to_dict(),
    )
