# shopfront/gateway/errors.py

"""Exception hierarchy for gateway and validation failures."""


class ShopError(Exception):
    """Base class for every error raised by shopfront."""


class GatewayError(ShopError):
    """A request to the remote shop API did not produce usable JSON."""

    def __init__(
        self, message: str, status_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkTimeout(GatewayError):
    """Connect or response timeout exceeded."""


class Unauthorized(GatewayError):
    """The API rejected our credentials and no refresh could fix it."""


class NotFound(GatewayError):
    """The requested resource does not exist (HTTP 404)."""


class UnknownGatewayError(GatewayError):
    """Unclassified transport failure or unexpected HTTP status."""


class ValidationError(ShopError):
    """Client-side input or payload failed validation."""


class InvalidQuantity(ValidationError):
    """Cart quantity must be a positive integer."""


class InvalidPayload(ValidationError):
    """Remote JSON could not be turned into a domain object."""
