"""
Once-a-day forced refresh of a category, independent of its cache duration.

Meant to be called at application start: the contact page, for instance,
is re-fetched at most once per 24 hours even while its cached record is
still considered fresh.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from .config import CONTACT, DAILY_REFRESH_INTERVAL, refresh_timestamp_key
from .content_service import ContentService
from .exceptions import ContentLoadError
from .logger import get_module_logger

logger = get_module_logger("daily_refresh")


class DailyRefresh:
    """Tracks the last forced refresh per category in the service's store."""

    def __init__(self, service: ContentService, interval: timedelta = DAILY_REFRESH_INTERVAL):
        self.service = service
        self.interval = interval

    @property
    def store(self):
        return self.service.store

    def last_refresh(self, category: str) -> Optional[datetime]:
        raw = self.store.get_string(refresh_timestamp_key(category))
        if raw is None:
            return None
        try:
            # Milliseconds since the epoch
            return datetime.fromtimestamp(int(raw) / 1000, tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as e:
            logger.warning(f"Ignoring unreadable refresh timestamp for {category}: {e}")
            return None

    def is_due(self, category: str) -> bool:
        last = self.last_refresh(category)
        return last is None or self.service.clock() - last >= self.interval

    def refresh_if_due(self, category: str = CONTACT) -> bool:
        """
        Force-refresh `category` if it was never refreshed or the last refresh
        is at least `interval` old.

        Returns:
            True only when a refresh ran and succeeded
        """
        if not self.is_due(category):
            logger.debug(f"Daily refresh of {category} not due yet")
            return False

        now = self.service.clock()
        try:
            self.service.refresh(category)
        except ContentLoadError as e:
            logger.warning(f"Daily refresh of {category} failed: {e.message}")
            return False

        self.store.set_string(refresh_timestamp_key(category), str(int(now.timestamp() * 1000)))
        logger.info(f"Daily refresh of {category} complete")
        return True

    def reset(self, category: str = CONTACT) -> None:
        """Forget the last refresh so the next refresh_if_due() runs."""
        self.store.delete(refresh_timestamp_key(category))
