"""
Attempt model for storing request history records.

Each execute-and-record call creates one attempt holding the method, the
URL, and the creation instant split into display fields.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


# HTTP methods accepted by the ledger and the executor
HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "CONNECT", "TRACE")

MAX_URL_LENGTH = 2048


class Attempt(Base):
    """
    SQLAlchemy model for a recorded request attempt.

    Attributes:
        id: Unique identifier, assigned in insertion order and never reused
        method: HTTP method used
        url: Target URL as given by the caller
        month: Two-digit month of the creation instant
        day: Two-digit day of the creation instant
        year: Four-digit year of the creation instant
        time: 12-hour clock time of the creation instant, e.g. "02:05 PM"
        created_at: Creation timestamp (UTC)
        is_favorite: Whether the attempt has been marked as a favorite
    """
    __tablename__ = "request_history"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    method: Mapped[str] = mapped_column(Enum(*HTTP_METHODS, name="http_method"))
    url: Mapped[str] = mapped_column(String(MAX_URL_LENGTH))
    month: Mapped[str] = mapped_column(String(2))
    day: Mapped[str] = mapped_column(String(2))
    year: Mapped[str] = mapped_column(String(4))
    time: Mapped[str] = mapped_column(String(11))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False)
