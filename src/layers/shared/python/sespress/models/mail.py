"""Mail request models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MailAddress(BaseModel):
    """A named mailbox. Values are untrusted until the dispatcher sanitizes them."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    email: str


class MailBody(BaseModel):
    """HTML and/or plain text parts of a message."""

    html: str | None = None
    text: str | None = None


class TemplateReference(BaseModel):
    """Template to render into the HTML part.

    ``path`` is a template name resolved through a TemplateResolver.
    ``variables`` maps placeholder names to values.
    """

    path: str = Field(..., min_length=1)
    variables: dict[str, Any] = Field(default_factory=dict, alias="meta")

    model_config = ConfigDict(populate_by_name=True)


class MailRequest(BaseModel):
    """A single outgoing mail, built by the caller and consumed once by the dispatcher."""

    subject: str = ""
    body: MailBody = Field(default_factory=MailBody, alias="message")
    sender: MailAddress | None = None
    recipients: list[MailAddress] = Field(default_factory=list)
    template: TemplateReference | None = None

    model_config = ConfigDict(populate_by_name=True)
