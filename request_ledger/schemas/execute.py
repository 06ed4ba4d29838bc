"""
Pydantic schemas for request execution.

Defines schemas for describing a proxied request and returning its result.
"""

from typing import Any

from pydantic import BaseModel, Field


class ExecuteRequest(BaseModel):
    """
    Schema for a request to execute on the caller's behalf.

    ``method`` and ``url`` are optional here so that the executor can report
    which of them is missing.
    """
    method: str | None = None
    url: str | None = None
    headers: dict[str, str] = {}
    body: Any = None
    timeout_ms: int | None = Field(default=None, gt=0, le=300_000)


class ExecutionResult(BaseModel):
    """
    Schema for a completed execution.

    Any HTTP response produces a result, whatever its status code.
    Header names are lower-cased.
    """
    status_code: int
    status_text: str
    headers: dict[str, str]
    body: str | None
    body_json: Any | None = None
    elapsed_ms: int
    response_size: int


class RecordedExecution(ExecutionResult):
    """Execution result together with the id of the history record it created."""
    history_id: int
