"""
Response envelope shared by the API endpoints.

Successful responses are wrapped as ``{success, message, data}``.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Standard success envelope."""
    success: bool = True
    message: str
    data: T | None = None


def ok(data=None, message: str = "Success") -> Envelope:
    return Envelope(success=True, message=message, data=data)


def created(data=None, message: str = "Created") -> Envelope:
    return Envelope(success=True, message=message, data=data)
