"""Error taxonomy shared by services and the HTTP boundary."""


class CardScanError(Exception):
    """Base error carrying the HTTP status the boundary reports."""

    status_code = 500
    public_message = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class InputValidationError(CardScanError):
    """Missing or malformed input; the request had no effect."""

    status_code = 400
    public_message = "Invalid request"


class AuthorizationError(CardScanError):
    """No caller identity could be resolved from the request."""

    status_code = 401
    public_message = "Unauthorized. Please sign in."


class NotFoundError(CardScanError):
    """Record is missing or owned by another user."""

    status_code = 404
    public_message = "Not found"


class UpstreamError(CardScanError):
    """A remote dependency failed."""

    status_code = 502
    public_message = "Upstream service failed"


class TextExtractionError(UpstreamError):
    """Raised when the vision service is misconfigured or its response is unusable."""


class StoreError(CardScanError):
    """Persistence failed and the transaction was rolled back."""

    status_code = 500
    public_message = "Failed to save to database"


class ConfigurationError(CardScanError):
    """Required server configuration is missing or unsafe."""

    status_code = 500
    public_message = "Server is not configured"
