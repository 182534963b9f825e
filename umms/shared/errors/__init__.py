from .base import (
    AppError,
    AuthError,
    ConflictError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    InternalError,
    InvalidCredentialError,
    MissingCredentialError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "AuthError",
    "ConflictError",
    "DomainError",
    "ForbiddenError",
    "InfrastructureError",
    "InternalError",
    "InvalidCredentialError",
    "MissingCredentialError",
    "NotFoundError",
    "UnauthenticatedError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
