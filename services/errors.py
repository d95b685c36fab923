"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to and a message that is safe to
return to clients. The API layer turns them into the ``{success, message}``
envelope in ``routers.error_handlers``.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError


class ServiceError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid request data"


class ConflictError(ServiceError):
    status_code = 400
    default_message = "Resource already exists"

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message or f"{field[:1].upper()}{field[1:]} already exists")


class AuthError(ServiceError):
    status_code = 401
    default_message = "Not authorized"


class AuthorizationError(ServiceError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Resource not found"


class UploadError(ServiceError):
    status_code = 502
    default_message = "Image upload failed"

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


# Overrides for pydantic's generic wording, keyed by (field, error type).
FIELD_MESSAGES: Dict[Tuple[str, str], str] = {
    ("title", "missing"): "Product title is required",
    ("title", "string_too_short"): "Product title is required",
    ("title", "string_too_long"): "Title cannot exceed 100 characters",
    ("description", "missing"): "Product description is required",
    ("description", "string_too_short"): "Product description is required",
    ("description", "string_too_long"): "Description cannot exceed 1000 characters",
    ("category", "missing"): "Product category is required",
    ("category", "enum"): "Category must be one of: {choices}",
    ("price", "greater_than_equal"): "Price cannot be negative",
    ("price", "float_parsing"): "Price must be a number",
    ("price", "finite_number"): "Price must be a number",
    ("in_stock", "bool_parsing"): "inStock must be true or false",
    ("username", "missing"): "Username is required",
    ("username", "string_too_short"): "Username must be at least 3 characters",
    ("username", "string_too_long"): "Username cannot exceed 30 characters",
    ("email", "missing"): "Email is required",
    ("email", "value_error"): "Please enter a valid email",
    ("password", "missing"): "Password is required",
    ("password", "string_too_short"): "Password must be at least 6 characters",
    ("shop_name", "string_too_long"): "Shop name cannot exceed 100 characters",
    ("shopName", "string_too_long"): "Shop name cannot exceed 100 characters",
}

_LOCATION_PREFIXES = {"body", "query", "path", "form", "header"}


def _field_message(field: str, error_type: str, fallback: str) -> str:
    template = FIELD_MESSAGES.get((field, error_type))
    if template is None:
        return f"{field}: {fallback}"
    if "{choices}" in template:
        from schemas.product import ProductCategory

        return template.format(choices=", ".join(c.value for c in ProductCategory))
    return template


def describe_errors(errors: Iterable[dict]) -> str:
    """Join pydantic error entries into one client-facing sentence."""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
        field = loc[-1] if loc else "request"
        message = _field_message(field, error.get("type", ""), error.get("msg", "is invalid"))
        if message not in messages:
            messages.append(message)
    return ", ".join(messages) or ValidationError.default_message


def validation_error_from(exc: PydanticValidationError) -> ValidationError:
    return ValidationError(describe_errors(exc.errors()))
