"""
Request history API routes.

Provides endpoints for executing requests, recording them in the history
ledger, and viewing and managing the recorded attempts.
"""

from fastapi import APIRouter, Depends, status

from ..dependencies import get_executor, get_ledger
from ..exceptions import ErrorResponse, TransportError
from ..schemas.envelope import Envelope, created, ok
from ..schemas.execute import ExecuteRequest, ExecutionResult, RecordedExecution
from ..schemas.history import AttemptListResponse, AttemptResponse, ClearResult, DeleteResult
from ..services.history_ledger import HistoryLedger
from ..services.http_executor import RequestExecutor


router = APIRouter(prefix="/api/history", tags=["history"])

EXECUTION_ERRORS = {
    422: {"model": ErrorResponse, "description": "Missing or invalid method or url"},
    502: {"model": ErrorResponse, "description": "Transport error"},
    504: {"model": ErrorResponse, "description": "Request timeout"},
}


@router.post(
    "/execute",
    response_model=Envelope[ExecutionResult],
    responses=EXECUTION_ERRORS
)
async def execute_only(
    request: ExecuteRequest,
    executor: RequestExecutor = Depends(get_executor)
):
    """
    Execute an HTTP request without saving it to history.

    Any response from the remote server is returned as a successful
    execution, whatever its status code.
    """
    result = await executor.execute(
        method=request.method,
        url=request.url,
        headers=request.headers,
        body=request.body,
        timeout_ms=request.timeout_ms
    )
    return ok(result, message="Request executed")


@router.post(
    "",
    response_model=Envelope[RecordedExecution],
    status_code=status.HTTP_201_CREATED,
    responses=EXECUTION_ERRORS
)
async def execute_and_record(
    request: ExecuteRequest,
    executor: RequestExecutor = Depends(get_executor),
    ledger: HistoryLedger = Depends(get_ledger)
):
    """
    Execute an HTTP request and record the attempt in history.

    The attempt is recorded even when the request fails at the transport
    level; the error response then carries the new ``history_id``.
    Invalid input is rejected before anything is executed or recorded.
    """
    method, url = ledger.validate(request.method, request.url)

    try:
        result = await executor.execute(
            method=method,
            url=url,
            headers=request.headers,
            body=request.body,
            timeout_ms=request.timeout_ms
        )
    except TransportError as exc:
        attempt = ledger.record(method, url)
        exc.data = {"history_id": attempt.id, "elapsed_ms": exc.elapsed_ms}
        raise

    attempt = ledger.record(method, url)
    recorded = RecordedExecution(**result.model_dump(), history_id=attempt.id)
    return created(recorded, message="Request executed and recorded")


@router.get("", response_model=AttemptListResponse)
def list_history(
    limit: str | None = None,
    offset: str | None = None,
    ledger: HistoryLedger = Depends(get_ledger)
):
    """
    Get history records ordered by creation time (most recent first).

    Args:
        limit: Maximum number of records to return (default 50)
        offset: Number of records to skip (default 0)

    Returns:
        AttemptListResponse with the page of items and the total record count
    """
    items, count = ledger.list(limit=limit, offset=offset)
    return AttemptListResponse(
        items=[AttemptResponse.model_validate(item) for item in items],
        count=count
    )


@router.get("/{history_id}", response_model=Envelope[AttemptResponse])
def get_history(history_id: int, ledger: HistoryLedger = Depends(get_ledger)):
    """
    Get a single history record by ID.

    Raises:
        NotFoundError: 404 if history record not found
    """
    attempt = ledger.get_by_id(history_id)
    return ok(AttemptResponse.model_validate(attempt))


@router.patch("/{history_id}/favorite", response_model=Envelope[AttemptResponse])
def toggle_favorite(history_id: int, ledger: HistoryLedger = Depends(get_ledger)):
    """
    Toggle the favorite flag of a history record.

    Raises:
        NotFoundError: 404 if history record not found
    """
    attempt = ledger.toggle_favorite(history_id)
    message = "Added to favorites" if attempt.is_favorite else "Removed from favorites"
    return ok(AttemptResponse.model_validate(attempt), message=message)


@router.delete("/{history_id}", response_model=Envelope[DeleteResult])
def delete_history(history_id: int, ledger: HistoryLedger = Depends(get_ledger)):
    """
    Delete a single history record by ID.

    Raises:
        NotFoundError: 404 if history record not found
    """
    ledger.delete_by_id(history_id)
    return ok(DeleteResult(id=history_id), message="History record deleted")


@router.delete("", response_model=Envelope[ClearResult])
def clear_all_history(ledger: HistoryLedger = Depends(get_ledger)):
    """Clear all history records."""
    removed_count = ledger.clear()
    return ok(ClearResult(removed_count=removed_count), message="History cleared")
