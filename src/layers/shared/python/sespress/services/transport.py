"""Email transport using Amazon SES.

The transport makes a single ``SendEmail`` call per message. Timeouts and
connection handling are left to the botocore defaults.
"""

from typing import Any, Protocol, Self

import boto3
import structlog
from botocore.exceptions import ClientError

from sespress.models.settings import SesPressSettings
from sespress.utils.exceptions import TransportError

logger = structlog.get_logger()

CHARSET = "UTF-8"


class EmailTransport(Protocol):
    """Capability that delivers one message through an email provider."""

    def send_email(
        self,
        destination: list[str],
        subject: str,
        html_body: str,
        text_body: str,
        source: str,
    ) -> str:
        """Send a message and return the provider message ID.

        Raises:
            TransportError: If the provider rejects the message.
        """
        ...


class SesTransport:
    """EmailTransport backed by the SES v1 ``SendEmail`` API."""

    def __init__(
        self,
        region_name: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
    ):
        """Initialize SES transport.

        Args:
            region_name: AWS region for SES. None uses the boto3 default chain.
            aws_access_key_id: Access key. None uses the boto3 default chain.
            aws_secret_access_key: Secret key paired with the access key.
        """
        self.region_name = region_name or None
        self.aws_access_key_id = aws_access_key_id or None
        self.aws_secret_access_key = aws_secret_access_key or None
        self._client = None

    @classmethod
    def from_settings(cls, settings: SesPressSettings) -> Self:
        """Build a transport from the configured region and credential pair."""
        return cls(
            region_name=settings.region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )

    @property
    def client(self):
        """Get SES client (lazy initialization).

        Returns:
            Boto3 SES client.
        """
        if self._client is None:
            kwargs: dict[str, Any] = {"region_name": self.region_name}
            if self.aws_access_key_id and self.aws_secret_access_key:
                kwargs["aws_access_key_id"] = self.aws_access_key_id
                kwargs["aws_secret_access_key"] = self.aws_secret_access_key
            self._client = boto3.client("ses", **kwargs)
        return self._client

    def send_email(
        self,
        destination: list[str],
        subject: str,
        html_body: str,
        text_body: str,
        source: str,
    ) -> str:
        """Send an email through SES.

        Args:
            destination: Formatted ``Name <email>`` recipients.
            subject: Message subject.
            html_body: HTML part, may be empty.
            text_body: Plain text part, may be empty.
            source: Formatted sender.

        Returns:
            SES message ID.

        Raises:
            TransportError: If SES returns an error.
        """
        kwargs: dict[str, Any] = {
            "Source": source,
            "Destination": {"ToAddresses": destination},
            "Message": {
                "Subject": {"Data": subject, "Charset": CHARSET},
                "Body": {
                    "Html": {"Data": html_body, "Charset": CHARSET},
                    "Text": {"Data": text_body, "Charset": CHARSET},
                },
            },
        }

        try:
            response = self.client.send_email(**kwargs)
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            error_message = e.response["Error"]["Message"]

            logger.error(
                "SES send failed",
                error_code=error_code,
                error_message=error_message,
                recipient_count=len(destination),
            )

            raise TransportError(
                error_message,
                code=error_code,
                original_error=str(e),
            ) from e

        return response["MessageId"]
