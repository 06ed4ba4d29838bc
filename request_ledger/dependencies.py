"""
FastAPI dependencies for reaching the components built at startup.
"""

from fastapi import Request

from .services.history_ledger import HistoryLedger
from .services.http_executor import RequestExecutor


def get_ledger(request: Request) -> HistoryLedger:
    """Return the history ledger created by the application lifespan."""
    return request.app.state.ledger


def get_executor(request: Request) -> RequestExecutor:
    """Return the request executor created by the application lifespan."""
    return request.app.state.executor
