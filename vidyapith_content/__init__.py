"""
Vidyapith Content

Scrapes the public pages of vidyapith.org into typed records and serves them
through a cache that falls back to stale data when the site is unreachable.
- Extractors:     one pure function per page (homepage, events, donate, ...)
- ContentService: fetch → extract → cache, with stale-on-failure fallback
- DailyRefresh:   at most one forced refresh per category per day

Public API surface:
  Service:          ContentService, CacheState, DailyRefresh
  Collaborators:    RequestsTransport, TransportResponse, FileStore, MemoryStore
  Data models:      HomepageContent, EventsContent, ... CalendarContent
  Error types:      ContentLoadError (fatal per fetch), StorageError (non-fatal)
"""

# --- Service ---
from .content_service import ContentService, CacheState
from .daily_refresh import DailyRefresh
from .calendar_source import CalendarSource

# --- Collaborators (swap these in tests or for other backends) ---
from .transport import RequestsTransport, TransportResponse
from .storage import FileStore, MemoryStore, get_default_store

# --- Data models ---
from .schemas import (
    ThoughtOfTheDay, UpcomingEvent, HomepageContent,
    Event, EventsContent,
    BookstoreContent,
    DonationMethod, DonateContent,
    AdmissionsContent,
    ContactContent,
    ClassSection, CurricularClassesContent,
    MusicClassSection, MusicClassesContent,
    SummerCampContent,
    CalendarEvent, CalendarContent,
)

# --- Exceptions (callers should catch ContentLoadError) ---
from .exceptions import ContentError, ContentLoadError, FetchError, StructureError, StorageError

# --- Text cleanup used by every extractor ---
from .normalizer import clean_html, parse_document

__version__ = "1.0.0"
__all__ = [
    "ContentService",
    "CacheState",
    "DailyRefresh",
    "CalendarSource",
    "RequestsTransport",
    "TransportResponse",
    "FileStore",
    "MemoryStore",
    "get_default_store",
    "ThoughtOfTheDay",
    "UpcomingEvent",
    "HomepageContent",
    "Event",
    "EventsContent",
    "BookstoreContent",
    "DonationMethod",
    "DonateContent",
    "AdmissionsContent",
    "ContactContent",
    "ClassSection",
    "CurricularClassesContent",
    "MusicClassSection",
    "MusicClassesContent",
    "SummerCampContent",
    "CalendarEvent",
    "CalendarContent",
    "ContentError",
    "ContentLoadError",
    "FetchError",
    "StructureError",
    "StorageError",
    "clean_html",
    "parse_document",
]
