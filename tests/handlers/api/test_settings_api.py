"""Tests for the settings API handler."""

import json
from unittest.mock import MagicMock, patch

import pytest


def _parse_body(response: dict) -> dict:
    """Parse JSON response body."""
    return json.loads(response["body"])


class TestSettingsApi:
    """Tests for settings management endpoints."""

    # -----------------------------------------------------------------
    # Access control
    # -----------------------------------------------------------------
    def test_non_admin_forbidden(self, dynamodb_table, api_gateway_event):
        """Non-admin callers cannot read settings."""
        from api.settings import handler

        event = api_gateway_event(method="GET", path="/settings", is_admin=False)

        response = handler(event, None)

        assert response["statusCode"] == 403

    def test_missing_identity_unauthorized(self, dynamodb_table, api_gateway_event):
        """Requests without a user identity are rejected."""
        from api.settings import handler

        event = api_gateway_event(method="GET", path="/settings")
        event["requestContext"]["authorizer"] = {}

        response = handler(event, None)

        assert response["statusCode"] == 401

    def test_unknown_route(self, dynamodb_table, api_gateway_event):
        """Unknown routes return 404."""
        from api.settings import handler

        response = handler(api_gateway_event(method="DELETE", path="/settings"), None)

        assert response["statusCode"] == 404

    def test_null_method_and_path(self, dynamodb_table, api_gateway_event):
        """Null method and path values route to 404, not a server error."""
        from api.settings import handler

        event = api_gateway_event(method="GET", path="/settings")
        event["httpMethod"] = None
        event["path"] = None

        response = handler(event, None)

        assert response["statusCode"] == 404

    # -----------------------------------------------------------------
    # GET /settings
    # -----------------------------------------------------------------
    def test_get_settings_incomplete(self, dynamodb_table, api_gateway_event):
        """A fresh install reports every required option as missing."""
        from api.settings import handler

        response = handler(api_gateway_event(method="GET", path="/settings"), None)

        assert response["statusCode"] == 200
        body = _parse_body(response)
        assert body["configuration_complete"] is False
        assert "region" in body["missing_options"]
        assert body["settings"]["enable_emails"] is False

    def test_get_settings_masks_secret(self, dynamodb_table, api_gateway_event, settings_values):
        """Stored secrets are never returned."""
        from api.settings import handler
        from sespress.repositories.settings import SettingsRepository

        SettingsRepository().save(settings_values)

        response = handler(api_gateway_event(method="GET", path="/settings"), None)

        body = _parse_body(response)
        assert body["configuration_complete"] is True
        assert body["missing_options"] == []
        assert body["settings"]["aws_secret_access_key"] == "********"
        assert body["settings"]["default_sender_email"] == "bot@x.com"

    # -----------------------------------------------------------------
    # PUT /settings
    # -----------------------------------------------------------------
    def test_update_settings(self, dynamodb_table, api_gateway_event):
        """Updates are validated and persisted."""
        from api.settings import handler
        from sespress.repositories.settings import SettingsRepository

        event = api_gateway_event(
            method="PUT",
            path="/settings",
            body={"region": "eu-west-1", "enable_emails": True, "default_sender_email": "bot@x.com"},
        )

        response = handler(event, None)

        assert response["statusCode"] == 200
        body = _parse_body(response)
        assert body["settings"]["region"] == "eu-west-1"
        assert body["settings"]["enable_emails"] is True

        repo = SettingsRepository()
        assert repo.get("enable_emails") == "on"
        assert repo.get("default_sender_email") == "bot@x.com"

    def test_update_settings_invalid_email(self, dynamodb_table, api_gateway_event):
        """Invalid addresses return a validation error."""
        from api.settings import handler

        event = api_gateway_event(method="PUT", path="/settings", body={"default_sender_email": "nope"})

        response = handler(event, None)

        assert response["statusCode"] == 400
        errors = _parse_body(response)["details"]["errors"]
        assert errors[0]["field"] == "default_sender_email"

    def test_update_settings_invalid_json(self, dynamodb_table, api_gateway_event):
        """Malformed bodies return a validation error."""
        from api.settings import handler

        response = handler(api_gateway_event(method="PUT", path="/settings", body="{not json"), None)

        assert response["statusCode"] == 400

    # -----------------------------------------------------------------
    # POST /settings/test-email
    # -----------------------------------------------------------------
    @patch("api.settings.get_mail_dispatcher")
    def test_send_test_email(self, mock_get_dispatcher, dynamodb_table, api_gateway_event):
        """A successful test send returns the message ID."""
        from api.settings import handler
        from sespress.models.result import Sent

        mock_dispatcher = MagicMock()
        mock_dispatcher.send.return_value = Sent("msg-42")
        mock_get_dispatcher.return_value = mock_dispatcher

        event = api_gateway_event(
            method="POST",
            path="/settings/test-email",
            body={"name": "Alice", "email": "alice@x.com"},
        )

        response = handler(event, None)

        assert response["statusCode"] == 200
        assert _parse_body(response) == {"success": True, "message_id": "msg-42"}
        request = mock_dispatcher.send.call_args.args[0]
        assert request.recipients[0].email == "alice@x.com"
        assert request.subject == "SesPress test email"

        from sespress.repositories.settings import SettingsRepository

        store = mock_get_dispatcher.call_args.kwargs["store"]
        assert isinstance(store, SettingsRepository)

    def test_send_test_email_disabled(self, dynamodb_table, api_gateway_event, settings_values):
        """A disabled install reports a conflict."""
        from api.settings import handler
        from sespress.repositories.settings import SettingsRepository

        SettingsRepository().save({**settings_values, "enable_emails": "off"})

        event = api_gateway_event(
            method="POST",
            path="/settings/test-email",
            body={"email": "alice@x.com"},
        )

        response = handler(event, None)

        assert response["statusCode"] == 409
        assert _parse_body(response)["error_code"] == "DISABLED"

    def test_send_test_email_through_ses(self, dynamodb_table, api_gateway_event, settings_values):
        """End-to-end test send against mocked SES."""
        import boto3

        from api.settings import handler
        from sespress.repositories.settings import SettingsRepository

        boto3.client("ses", region_name="us-east-1").verify_email_identity(EmailAddress="bot@x.com")
        SettingsRepository().save(settings_values)

        event = api_gateway_event(
            method="POST",
            path="/settings/test-email",
            body={"name": "Alice", "email": "alice@x.com"},
        )

        response = handler(event, None)

        assert response["statusCode"] == 200
        assert _parse_body(response)["message_id"]

    @pytest.mark.parametrize("body", [{}, {"email": "bad"}])
    def test_send_test_email_invalid_body(self, dynamodb_table, api_gateway_event, body):
        """The test recipient must be a valid address."""
        from api.settings import handler

        event = api_gateway_event(method="POST", path="/settings/test-email", body=body)
        if not body:
            event["body"] = "{}"

        response = handler(event, None)

        assert response["statusCode"] == 400
