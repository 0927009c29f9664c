from .base import (
    AppError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    StoreTimeoutError,
    StoreUnavailableError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "ForbiddenError",
    "InfrastructureError",
    "StoreTimeoutError",
    "StoreUnavailableError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
