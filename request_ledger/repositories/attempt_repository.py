"""
Storage access for attempt records.

The ledger talks to storage only through the ``AttemptStore`` protocol;
``SQLAlchemyAttemptStore`` implements it on top of a SQLAlchemy session
factory. Every method runs in its own session and commits before returning.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..exceptions import StorageError
from ..models.attempt import Attempt


class AttemptStore(Protocol):
    """Narrow storage interface used by the history ledger."""

    def create(self, attempt: Attempt) -> Attempt: ...

    def find_page(self, limit: int, offset: int) -> list[Attempt]: ...

    def find_by_id(self, attempt_id: int) -> Attempt | None: ...

    def update(self, attempt: Attempt) -> Attempt: ...

    def delete(self, attempt_id: int) -> int: ...

    def delete_all(self) -> int: ...

    def count(self) -> int: ...


class SQLAlchemyAttemptStore:
    """``AttemptStore`` backed by a SQLAlchemy database."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self.session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(str(e)) from e
        finally:
            session.close()

    def create(self, attempt: Attempt) -> Attempt:
        with self._session() as session:
            session.add(attempt)
            session.commit()
            session.refresh(attempt)
            return attempt

    def find_page(self, limit: int, offset: int) -> list[Attempt]:
        """Return a window of attempts, most recent first."""
        with self._session() as session:
            stmt = (
                select(Attempt)
                .order_by(Attempt.created_at.desc(), Attempt.id.asc())
                .offset(offset)
                .limit(limit)
            )
            return list(session.scalars(stmt).all())

    def find_by_id(self, attempt_id: int) -> Attempt | None:
        with self._session() as session:
            return session.get(Attempt, attempt_id)

    def update(self, attempt: Attempt) -> Attempt:
        with self._session() as session:
            attempt = session.merge(attempt)
            session.commit()
            session.refresh(attempt)
            return attempt

    def delete(self, attempt_id: int) -> int:
        """Delete one attempt and return the number of rows removed."""
        with self._session() as session:
            result = session.execute(delete(Attempt).where(Attempt.id == attempt_id))
            session.commit()
            return result.rowcount

    def delete_all(self) -> int:
        """Delete every attempt and return the number of rows removed."""
        with self._session() as session:
            result = session.execute(delete(Attempt))
            session.commit()
            return result.rowcount

    def count(self) -> int:
        with self._session() as session:
            return session.scalar(select(func.count()).select_from(Attempt)) or 0
