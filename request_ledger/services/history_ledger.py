"""
History ledger service.

Owns the attempt records: recording new attempts with their display date
fields, paginated listing, lookup, favorite toggling, and deletion.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

from ..exceptions import NotFoundError
from ..models.attempt import Attempt, MAX_URL_LENGTH
from ..repositories.attempt_repository import AttemptStore
from ..utils.logging import get_logger
from .validation import normalize_method, parse_page_param, require_url

logger = get_logger(__name__)

DEFAULT_LIMIT = 50
DEFAULT_OFFSET = 0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_clock_time(moment: datetime) -> str:
    """Format a time as a 12-hour clock, e.g. "02:05 PM", independent of locale."""
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{moment.strftime('%I:%M')} {suffix}"


class HistoryLedger:
    """
    Persisted history of request attempts.

    The ledger is created once at startup and passed to the routes that
    need it. ``clock`` must return timezone-aware datetimes; it defaults to
    the current UTC time.
    """

    def __init__(
        self,
        store: AttemptStore,
        clock: Callable[[], datetime] | None = None,
        display_timezone: str = "UTC"
    ):
        self.store = store
        self.clock = clock or utc_now
        self.display_timezone = ZoneInfo(display_timezone)

    def validate(self, method: Any, url: Any) -> tuple[str, str]:
        """
        Check that a method and URL can be recorded.

        Returns:
            The upper-case method and the URL

        Raises:
            ValidationError: If method or url is missing or invalid
        """
        return normalize_method(method), require_url(url, max_length=MAX_URL_LENGTH)

    def record(self, method: Any, url: Any) -> Attempt:
        """
        Persist a new attempt for the given method and URL.

        The current instant is read once; ``created_at`` and the
        month/day/year/time fields are all derived from it.

        Raises:
            ValidationError: If method or url is missing or invalid
        """
        method, url = self.validate(method, url)

        now = self.clock()
        local = now.astimezone(self.display_timezone)

        attempt = Attempt(
            method=method,
            url=url,
            month=local.strftime("%m"),
            day=local.strftime("%d"),
            year=f"{local.year:04d}",
            time=format_clock_time(local),
            created_at=now.astimezone(timezone.utc),
            is_favorite=False,
        )
        attempt = self.store.create(attempt)

        logger.info("attempt_recorded", attempt_id=attempt.id, method=method, url=url)
        return attempt

    def list(self, limit: Any = DEFAULT_LIMIT, offset: Any = DEFAULT_OFFSET) -> tuple[list[Attempt], int]:
        """
        Return a window of attempts ordered most recent first, plus the total count.

        Raises:
            ValidationError: If limit or offset is not a non-negative integer
        """
        limit = parse_page_param(limit, "limit", DEFAULT_LIMIT)
        offset = parse_page_param(offset, "offset", DEFAULT_OFFSET)

        total = self.store.count()
        items = self.store.find_page(limit=limit, offset=offset)
        return items, total

    def get_by_id(self, attempt_id: int) -> Attempt:
        """
        Raises:
            NotFoundError: If no attempt has this id
        """
        attempt = self.store.find_by_id(attempt_id)
        if attempt is None:
            raise NotFoundError("History record", attempt_id)
        return attempt

    def toggle_favorite(self, attempt_id: int) -> Attempt:
        """
        Flip the favorite flag of an attempt and return the updated record.

        This is a plain read-then-write: concurrent toggles of the same
        attempt are last-write-wins.
        """
        attempt = self.get_by_id(attempt_id)
        attempt.is_favorite = not attempt.is_favorite
        attempt = self.store.update(attempt)

        logger.info(
            "attempt_favorite_toggled",
            attempt_id=attempt_id,
            is_favorite=attempt.is_favorite,
        )
        return attempt

    def delete_by_id(self, attempt_id: int) -> None:
        """
        Raises:
            NotFoundError: If no attempt has this id
        """
        removed = self.store.delete(attempt_id)
        if removed == 0:
            raise NotFoundError("History record", attempt_id)
        logger.info("attempt_deleted", attempt_id=attempt_id)

    def clear(self) -> int:
        """Delete every attempt and return how many were removed."""
        removed = self.store.delete_all()
        logger.info("history_cleared", removed_count=removed)
        return removed
