"""
Models package for Request Ledger.

Exports all SQLAlchemy models for database operations.
"""

from .attempt import Attempt, HTTP_METHODS, MAX_URL_LENGTH

__all__ = [
    "Attempt",
    "HTTP_METHODS",
    "MAX_URL_LENGTH",
]
