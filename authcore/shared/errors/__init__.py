from .base import (
    AppError,
    ConfigurationError,
    DomainError,
    InfrastructureError,
    InvalidInputError,
    PasswordHashingError,
    StorageError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "ConfigurationError",
    "DomainError",
    "InfrastructureError",
    "InvalidInputError",
    "PasswordHashingError",
    "StorageError",
    "handle_app_error",
    "register_error_handler",
]
