from typing import Any, Dict, List, Optional, Union

ErrorData = Union[Dict[str, List[str]], List[Any]]


class AppError(Exception):
    """Base for every failure that is reported to the client in the envelope."""

    status_code: int = 400
    default_message: str = "Request failed."

    def __init__(self, message: Optional[str] = None, data: Optional[ErrorData] = None):
        self.message = message or self.default_message
        self.data = data if data is not None else []
        super().__init__(self.message)


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found."


class ValidationError(AppError):
    status_code = 422
    default_message = "Validation Error."

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(data={field: [message]})


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict."


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Unauthorized."


class UnsupportedMediaTypeError(AppError):
    status_code = 415
    default_message = "Invalid file type."


class StorageError(Exception):
    """Raised by storage backends when a blob operation cannot be completed."""
