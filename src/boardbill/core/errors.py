"""Billing error taxonomy."""


class BillingError(Exception):
    """Base class for every error raised while building an invoice."""

    pass


class InvalidRequest(BillingError):
    """Raised when request parameters are rejected before any external call."""

    pass


class Unauthorized(BillingError):
    """Raised when the board service rejects the supplied credentials."""

    pass


class InvalidKey(Unauthorized):
    """The Trello API key is invalid."""

    def __init__(self, message: str = "The provided Trello API key is invalid."):
        super().__init__(message)


class InvalidToken(Unauthorized):
    """The Trello API token is invalid."""

    def __init__(self, message: str = "The provided Trello API token is invalid."):
        super().__init__(message)


class UpstreamError(BillingError):
    """Raised for board service failures unrelated to credentials."""

    pass


class MalformedEvent(BillingError):
    """Raised when an event log entry is missing expected fields."""

    pass
