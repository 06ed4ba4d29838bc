"""Storage repositories."""

from .attempt_repository import AttemptStore, SQLAlchemyAttemptStore

__all__ = ["AttemptStore", "SQLAlchemyAttemptStore"]
