"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .envelope import Envelope, ok, created

from .history import (
    AttemptResponse,
    AttemptListResponse,
    ClearResult,
    DeleteResult,
)

from .execute import (
    ExecuteRequest,
    ExecutionResult,
    RecordedExecution,
)

__all__ = [
    # Envelope
    "Envelope",
    "ok",
    "created",
    # History schemas
    "AttemptResponse",
    "AttemptListResponse",
    "ClearResult",
    "DeleteResult",
    # Execute schemas
    "ExecuteRequest",
    "ExecutionResult",
    "RecordedExecution",
]
