"""
Fetch-cache orchestrator.

ContentService is the entry point callers use. For every category it:
  1. reads the cached record from the store (a corrupt entry counts as none)
  2. returns it if it is younger than the category's cache duration
  3. otherwise downloads the page, runs the category's extractor, stores and
     returns the fresh record
  4. if that fails, returns the cached record however old it is, and only
     raises when there is nothing cached at all

Pipeline per fetch:
  transport.get(url) → parse_document(body) → extract_<category>(doc, url)
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional

from pydantic import ValidationError

from .admissions import extract_admissions
from .bookstore import extract_bookstore
from .calendar_source import CalendarSource
from .classes import extract_curricular_classes, extract_music_classes, extract_summer_camp
from .config import (
    ADMISSIONS, BOOKSTORE, CALENDAR, CATEGORIES, CONTACT, CURRICULAR_CLASSES, DONATE,
    EVENTS, HOMEPAGE, MUSIC_CLASSES, SUMMER_CAMP, CategoryConfig,
)
from .contact import extract_contact
from .donate import extract_donate
from .events import extract_events
from .exceptions import FetchError, StorageError
from .homepage import extract_homepage
from .logger import get_module_logger
from .normalizer import parse_document
from .schemas import (
    AdmissionsContent, BookstoreContent, CalendarContent, ContactContent, ContentRecord,
    CurricularClassesContent, DonateContent, EventsContent, HomepageContent,
    MusicClassesContent, SummerCampContent, utc_now,
)
from .storage import get_default_store
from .transport import RequestsTransport

logger = get_module_logger("content_service")

# Record type and extractor per page category. The calendar has no page and
# is built by CalendarSource instead.
PAGE_EXTRACTORS: dict[str, tuple[type[ContentRecord], Callable]] = {
    HOMEPAGE: (HomepageContent, extract_homepage),
    EVENTS: (EventsContent, extract_events),
    BOOKSTORE: (BookstoreContent, extract_bookstore),
    DONATE: (DonateContent, extract_donate),
    ADMISSIONS: (AdmissionsContent, extract_admissions),
    CONTACT: (ContactContent, extract_contact),
    CURRICULAR_CLASSES: (CurricularClassesContent, extract_curricular_classes),
    MUSIC_CLASSES: (MusicClassesContent, extract_music_classes),
    SUMMER_CAMP: (SummerCampContent, extract_summer_camp),
}

RECORD_TYPES: dict[str, type[ContentRecord]] = {
    **{name: record_type for name, (record_type, _) in PAGE_EXTRACTORS.items()},
    CALENDAR: CalendarContent,
}


class CacheState(Enum):
    NO_CACHE = "no_cache"
    CACHED_FRESH = "cached_fresh"
    CACHED_STALE = "cached_stale"
    FETCHING = "fetching"
    ERROR_WITH_FALLBACK = "error_with_fallback"
    ERROR_NO_FALLBACK = "error_no_fallback"


class ContentService:
    """
    Cached access to every content category.

    Collaborators are injected so tests can swap them:
      transport:        get(url) -> TransportResponse   (default RequestsTransport)
      store:            get_string / set_string / delete (default FileStore)
      clock:            () -> aware datetime              (default UTC now)
      cache_durations:  per-category overrides of the configured durations
    """

    def __init__(
        self,
        transport=None,
        store=None,
        clock: Optional[Callable[[], datetime]] = None,
        cache_durations: Optional[dict[str, timedelta]] = None,
        calendar_source: Optional[CalendarSource] = None
    ):
        self.transport = transport or RequestsTransport()
        self.store = store if store is not None else get_default_store()
        self.clock = clock or utc_now
        self.cache_durations = {name: config.cache_duration for name, config in CATEGORIES.items()}
        self.cache_durations.update(cache_durations or {})
        self.calendar_source = calendar_source or CalendarSource(clock=self.clock)

    # --- Cache ---

    def _config(self, category: str) -> CategoryConfig:
        try:
            return CATEGORIES[category]
        except KeyError:
            raise ValueError(
                f"Unknown content category: {category!r}. "
                f"Expected one of: {', '.join(CATEGORIES)}"
            ) from None

    def load_cached(self, category: str) -> Optional[ContentRecord]:
        """The stored record for a category, or None if absent or unreadable."""
        config = self._config(category)
        raw = self.store.get_string(config.cache_key)
        if raw is None:
            return None

        try:
            return RECORD_TYPES[category].from_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring corrupt cache entry for {category}: {e}")
            return None

    def is_fresh(self, category: str, record: ContentRecord) -> bool:
        """Fresh means age <= duration: a record exactly at the limit is still served."""
        age = self.clock() - record.fetched_at
        return age <= self.cache_durations[category]

    def cache_state(self, category: str) -> CacheState:
        record = self.load_cached(category)
        if record is None:
            return CacheState.NO_CACHE
        return CacheState.CACHED_FRESH if self.is_fresh(category, record) else CacheState.CACHED_STALE

    def _persist(self, category: str, record: ContentRecord) -> None:
        """Store a fresh record. Failures are logged, never raised."""
        config = self._config(category)
        try:
            stored = self.store.set_string(config.cache_key, record.to_json())
        except Exception as e:
            error = StorageError(f"Could not write store entry: {e}", key=config.cache_key)
            logger.warning(f"{error.message} (key={error.key})")
            stored = False

        if not stored:
            logger.warning(f"Could not cache {category}; returning fresh content uncached")

    # --- Fetching ---

    def fetch_content(self, category: str) -> ContentRecord:
        """
        Download and extract a category, bypassing the cache entirely.

        Raises:
            FetchError: transport failure or a non-200 response
            StructureError: the page lacks sections the category requires
        """
        config = self._config(category)
        logger.info(f"[{CacheState.FETCHING.value}] {category}")

        if category == CALENDAR:
            return self.calendar_source.build()

        try:
            response = self.transport.get(config.url)
        except FetchError as e:
            raise FetchError(
                f"Failed to load {category}: {e.message}",
                category=category,
                url=config.url,
                status_code=e.status_code,
                details=e.details
            ) from e

        if response.status_code != 200:
            raise FetchError(
                f"Failed to load {category} (status: {response.status_code})",
                category=category,
                url=config.url,
                status_code=response.status_code
            )

        _, extractor = PAGE_EXTRACTORS[category]
        document = parse_document(response.body)
        return extractor(document, config.url, fetched_at=self.clock())

    def refresh(self, category: str) -> ContentRecord:
        """Fetch and store a category. Unlike get_content(), failures always raise."""
        fresh = self.fetch_content(category)
        self._persist(category, fresh)
        return fresh

    def get_content(self, category: str, force_refresh: bool = False) -> ContentRecord:
        """
        Cached record if fresh, else a fresh fetch; stale cache on failure.

        Any failure to fetch or extract falls back to the cached record,
        whatever its age. Unknown categories raise ValueError before that.

        Raises:
            ContentLoadError: the fetch failed and nothing was cached
            Exception: whatever an injected transport raised, when nothing was cached
        """
        cached = self.load_cached(category)

        if cached is not None and not force_refresh and self.is_fresh(category, cached):
            logger.debug(f"[{CacheState.CACHED_FRESH.value}] {category}")
            return cached

        if cached is None:
            logger.info(f"[{CacheState.NO_CACHE.value}] {category}")
        elif not force_refresh:
            logger.info(f"[{CacheState.CACHED_STALE.value}] {category}")

        try:
            return self.refresh(category)
        except Exception as e:
            message = getattr(e, "message", None) or f"{type(e).__name__}: {e}"
            if cached is not None:
                logger.warning(
                    f"[{CacheState.ERROR_WITH_FALLBACK.value}] {category}: {message}; "
                    f"serving cache from {cached.fetched_at.isoformat()}"
                )
                return cached
            logger.error(f"[{CacheState.ERROR_NO_FALLBACK.value}] {category}: {message}")
            raise

    # --- Per-category getters ---

    def get_homepage_content(self, force_refresh: bool = False) -> HomepageContent:
        return self.get_content(HOMEPAGE, force_refresh)

    def get_events_content(self, force_refresh: bool = False) -> EventsContent:
        return self.get_content(EVENTS, force_refresh)

    def get_bookstore_content(self, force_refresh: bool = False) -> BookstoreContent:
        return self.get_content(BOOKSTORE, force_refresh)

    def get_donate_content(self, force_refresh: bool = False) -> DonateContent:
        return self.get_content(DONATE, force_refresh)

    def get_admissions_content(self, force_refresh: bool = False) -> AdmissionsContent:
        return self.get_content(ADMISSIONS, force_refresh)

    def get_contact_content(self, force_refresh: bool = False) -> ContactContent:
        return self.get_content(CONTACT, force_refresh)

    def get_curricular_classes_content(self, force_refresh: bool = False) -> CurricularClassesContent:
        return self.get_content(CURRICULAR_CLASSES, force_refresh)

    def get_music_classes_content(self, force_refresh: bool = False) -> MusicClassesContent:
        return self.get_content(MUSIC_CLASSES, force_refresh)

    def get_summer_camp_content(self, force_refresh: bool = False) -> SummerCampContent:
        return self.get_content(SUMMER_CAMP, force_refresh)

    def get_calendar_content(self, force_refresh: bool = False) -> CalendarContent:
        return self.get_content(CALENDAR, force_refresh)

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()
