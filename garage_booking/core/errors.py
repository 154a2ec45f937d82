from typing import Any, Dict, List, Optional


class BookingError(Exception):
    """
    Base class for errors that end a request with a JSON envelope.
    `message` is always safe to show to the client.
    """
    status_code: int = 500
    message: str = "An error occurred while saving your booking."

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.message
        self.errors = errors
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": False, "message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class ValidationFailed(BookingError):
    status_code = 422
    message = "Validation failed"

    def __init__(self, errors: List[str]):
        super().__init__(errors=list(errors))


class CapacityConflict(BookingError):
    status_code = 409
    message = "This time slot is already full. Please choose another one."

    def __init__(self, preferred_date=None, time_slot: str = ""):
        self.preferred_date = preferred_date
        self.time_slot = time_slot
        super().__init__()


class StorageError(BookingError):
    # Raised `from` the driver error; the cause is logged, never returned.
    status_code = 500
