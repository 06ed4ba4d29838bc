"""
Input checks shared by the executor and the history ledger.
"""

from typing import Any

from ..exceptions import ValidationError
from ..models.attempt import HTTP_METHODS


def normalize_method(method: Any) -> str:
    """
    Validate an HTTP method and return its upper-case form.

    Raises:
        ValidationError: If the method is missing or not a supported method
    """
    if not isinstance(method, str) or not method.strip():
        raise ValidationError("method is required")

    normalized = method.strip().upper()
    if normalized not in HTTP_METHODS:
        raise ValidationError(
            f"method '{method}' is not supported; expected one of {', '.join(HTTP_METHODS)}"
        )
    return normalized


def require_url(url: Any, max_length: int | None = None) -> str:
    """Validate that a URL is a non-empty string of at most ``max_length`` characters."""
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("url is required")
    if max_length is not None and len(url) > max_length:
        raise ValidationError(f"url must be at most {max_length} characters")
    return url


def parse_page_param(value: Any, name: str, default: int) -> int:
    """
    Coerce a pagination parameter to a non-negative integer.

    ``None`` and empty strings fall back to the default. Booleans, fractional
    or non-numeric values and negative numbers are rejected.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a non-negative integer")

    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a non-negative integer")

    if isinstance(value, float) and value != number:
        raise ValidationError(f"{name} must be a non-negative integer")
    if number < 0:
        raise ValidationError(f"{name} must be a non-negative integer")
    return number
