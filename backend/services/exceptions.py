"""Custom exceptions for the marketplace services.

Every exception carries the HTTP status and machine-readable code the API
layer answers with (see ``common.exceptions``).
"""


class MarketplaceError(Exception):
    """Base class for request-scoped business rule failures."""
    status_code = 400
    code = "error"
    default_message = "Request could not be processed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailedError(MarketplaceError):
    """Raised when input is missing or malformed."""
    status_code = 400
    code = "validation_error"
    default_message = "Invalid input"


class ForbiddenError(MarketplaceError):
    """Raised when the caller is authenticated but may not touch the resource."""
    status_code = 403
    code = "forbidden"
    default_message = "You are not allowed to perform this action"


class NotFoundError(MarketplaceError):
    """Raised when a referenced entity does not exist."""
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class RideNotFoundError(NotFoundError):
    """Raised when a ride cannot be found."""
    default_message = "Ride not found"


class BookingNotFoundError(NotFoundError):
    """Raised when a booking cannot be found."""
    default_message = "Booking not found"


class VehicleNotFoundError(NotFoundError):
    """Raised when a vehicle cannot be found."""
    default_message = "Vehicle not found"


class ConflictError(MarketplaceError):
    """Raised on uniqueness or business-rule collisions."""
    status_code = 409
    code = "conflict"
    default_message = "Conflicts with existing data"


class SoldOutError(MarketplaceError):
    """Raised when a ride has no seats left."""
    status_code = 409
    code = "sold_out"
    default_message = "No seats available"


class InvalidStateError(MarketplaceError):
    """Raised when the operation is illegal for the entity's current status."""
    status_code = 400
    code = "invalid_state"
    default_message = "Operation not allowed in the current status"
