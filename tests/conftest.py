"""Pytest configuration and fixtures."""

import os

import pytest

# Set environment variables before imports
os.environ["TABLE_NAME"] = "sespress-test"
os.environ["STAGE"] = "test"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def dynamodb_table(aws_credentials):
    """Create mocked DynamoDB table."""
    import boto3
    from moto import mock_aws

    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        table = dynamodb.create_table(
            TableName="sespress-test",
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        table.wait_until_exists()

        yield table


@pytest.fixture
def settings_values():
    """Raw option values for a complete, enabled, non-test-mode install."""
    return {
        "region": "us-east-1",
        "default_sender_name": "Bot",
        "default_sender_email": "bot@x.com",
        "enable_emails": "on",
        "aws_access_key_id": "AKIATESTKEY",
        "aws_secret_access_key": "test-secret",
        "test_mode": "off",
        "test_mode_recipient_name": "QA Inbox",
        "test_mode_recipient_email": "qa@x.com",
    }


@pytest.fixture
def make_store(settings_values):
    """Build a MappingConfigurationStore with option overrides."""
    from sespress.config import MappingConfigurationStore

    def _make_store(**overrides):
        values = dict(settings_values)
        values.update(overrides)
        return MappingConfigurationStore(values)

    return _make_store


@pytest.fixture
def api_gateway_event():
    """Create a sample API Gateway event."""
    def _create_event(
        method: str = "GET",
        path: str = "/",
        body: dict = None,
        user_id: str = "test-user-123",
        is_admin: bool = True,
    ):
        return {
            "httpMethod": method,
            "path": path,
            "pathParameters": {},
            "queryStringParameters": {},
            "body": body if isinstance(body, str) else (
                __import__("json").dumps(body) if body else None
            ),
            "headers": {
                "Authorization": "Bearer test-token",
                "Content-Type": "application/json",
            },
            "requestContext": {
                "authorizer": {
                    "userId": user_id,
                    "email": "admin@example.com",
                    "isAdmin": "true" if is_admin else "false",
                },
            },
        }

    return _create_event
