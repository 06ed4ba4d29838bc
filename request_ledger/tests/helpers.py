"""
Shared helpers for the test modules.
"""

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from request_ledger.config import Settings
from request_ledger.database import Base, create_db_engine, create_session_factory, init_db
from request_ledger.dependencies import get_executor, get_ledger
from request_ledger.main import create_app
from request_ledger.repositories.attempt_repository import SQLAlchemyAttemptStore
from request_ledger.services.history_ledger import HistoryLedger


class SteppingClock:
    """Clock returning a fixed start instant, advancing by ``step`` on every call."""

    def __init__(
        self,
        start: datetime = datetime(2025, 7, 14, 14, 5, tzinfo=timezone.utc),
        step: timedelta = timedelta(seconds=1)
    ):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now


@contextmanager
def make_ledger(database_url: str, clock=None, display_timezone: str = "UTC"):
    """Context manager yielding a ledger over a fresh database."""
    engine = create_db_engine(database_url)
    init_db(engine)
    ledger = HistoryLedger(
        store=SQLAlchemyAttemptStore(create_session_factory(engine)),
        clock=clock,
        display_timezone=display_timezone
    )
    try:
        yield ledger
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@contextmanager
def get_test_client(database_url: str, executor=None, ledger=None, **settings_overrides):
    """
    Context manager to create a test client with a fresh database.

    ``executor`` and ``ledger`` replace the components built at startup.
    """
    settings = Settings(database_url=database_url, **settings_overrides)
    app = create_app(settings)
    if executor is not None:
        app.dependency_overrides[get_executor] = lambda: executor
    if ledger is not None:
        app.dependency_overrides[get_ledger] = lambda: ledger

    with TestClient(app) as test_client:
        try:
            yield test_client
        finally:
            Base.metadata.drop_all(bind=app.state.engine)
            app.dependency_overrides.clear()
