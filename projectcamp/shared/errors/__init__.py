from .base import AppError, ErrorKind
from .http import handle_app_error, register_error_handler, respond_to_error
from .validation import format_violations, raise_validation_error

__all__ = [
    "AppError",
    "ErrorKind",
    "format_violations",
    "handle_app_error",
    "raise_validation_error",
    "register_error_handler",
    "respond_to_error",
]
