"""
Error taxonomy shared by the API, the services and the client modules.

Every error carries a user-facing message and the HTTP status it maps to, so
routes can render ``{"error": message}`` and clients can rebuild the same
exception from a response body.
"""


class TripPlannerError(Exception):
    status_code = 500
    default_message = "Something went wrong."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TripPlannerError):
    status_code = 400
    default_message = "Missing required fields."


class AuthError(TripPlannerError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(TripPlannerError):
    status_code = 404
    default_message = "Trip not found."


class GatewayError(TripPlannerError):
    status_code = 500
    default_message = "Failed to generate itinerary."


class EmptyCompletionError(GatewayError):
    default_message = "No itinerary returned from the completion service."


class StoreUnavailable(TripPlannerError):
    status_code = 503
    default_message = "User not found or database unavailable."


_BY_STATUS = {
    400: ValidationError,
    401: AuthError,
    404: NotFound,
    503: StoreUnavailable,
}


def error_from_status(status_code: int, message: str | None) -> TripPlannerError:
    """Rebuild a typed error from an HTTP status and an ``error`` body."""
    error_cls = _BY_STATUS.get(status_code)
    if error_cls is None:
        error_cls = GatewayError if status_code >= 500 else TripPlannerError
    return error_cls(message)
