"""Custom exception classes for SesPress."""


class SesPressError(Exception):
    """Base exception for all SesPress errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int = 500,
        details: dict | None = None,
    ):
        """Initialize SesPressError.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            status_code: HTTP status code for API responses.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API response."""
        result = {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(SesPressError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: list[dict] | None = None,
    ):
        """Initialize ValidationError.

        Args:
            message: Error message.
            errors: List of validation errors with field and message.
        """
        self.errors = errors or []
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details={"errors": self.errors},
        )

    @classmethod
    def from_pydantic(cls, exc: Exception) -> "ValidationError":
        """Create ValidationError from Pydantic ValidationError."""
        errors = []
        if hasattr(exc, "errors"):
            for error in exc.errors():
                errors.append(
                    {
                        "field": ".".join(str(loc) for loc in error.get("loc", [])),
                        "message": error.get("msg", "Invalid value"),
                        "type": error.get("type", "unknown"),
                    }
                )
        return cls(message="Validation failed", errors=errors)


class UnauthorizedError(SesPressError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication required"):
        """Initialize UnauthorizedError."""
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED",
            status_code=401,
        )


class ForbiddenError(SesPressError):
    """Raised when the caller lacks permission for an action."""

    def __init__(
        self,
        message: str = "You don't have permission to perform this action",
        action: str | None = None,
    ):
        """Initialize ForbiddenError."""
        super().__init__(
            message=message,
            error_code="FORBIDDEN",
            status_code=403,
            details={"action": action} if action else None,
        )


class TransportError(SesPressError):
    """Raised when the email provider rejects or fails a send."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        original_error: str | None = None,
    ):
        """Initialize TransportError.

        Args:
            message: Provider error message.
            code: Provider error code (e.g. ``MessageRejected``).
            original_error: String form of the underlying exception.
        """
        self.code = code
        super().__init__(
            message=message,
            error_code="TRANSPORT_ERROR",
            status_code=502,
            details={"provider_code": code, "original_error": original_error},
        )


class TemplateError(SesPressError):
    """Raised when a mail template cannot be rendered."""

    def __init__(self, message: str, template: str | None = None):
        """Initialize TemplateError."""
        self.template = template
        super().__init__(
            message=message,
            error_code="TEMPLATE_ERROR",
            status_code=500,
            details={"template": template} if template else None,
        )
