"""
Site configuration: page URLs, cache keys, cache durations and the
organization-specific keywords the extractors anchor on.

Cache keys carry a version suffix. Bump it when a record's shape changes so
entries written by an older build are ignored instead of half-parsed.
"""

from dataclasses import dataclass
from datetime import timedelta

BASE_URL = "https://www.vidyapith.org/"

PAGE_CACHE_DURATION = timedelta(hours=24)
CALENDAR_CACHE_DURATION = timedelta(days=7)

# How often DailyRefresh re-fetches a category regardless of cache state
DAILY_REFRESH_INTERVAL = timedelta(hours=24)

# Transport
REQUEST_TIMEOUT = 30  # seconds
DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; vidyapith-content/1.0)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


@dataclass(frozen=True)
class CategoryConfig:
    """Where a category lives on the site and how long its cache entry stays fresh."""
    name: str
    url: str
    cache_key: str
    cache_duration: timedelta = PAGE_CACHE_DURATION


# --- Category names ---
HOMEPAGE = "homepage"
EVENTS = "events"
BOOKSTORE = "bookstore"
DONATE = "donate"
ADMISSIONS = "admissions"
CONTACT = "contact"
CURRICULAR_CLASSES = "curricular_classes"
MUSIC_CLASSES = "music_classes"
SUMMER_CAMP = "summer_camp"
CALENDAR = "calendar"

CATEGORIES: dict[str, CategoryConfig] = {
    config.name: config for config in (
        CategoryConfig(HOMEPAGE, BASE_URL, "website_content_cache_v1"),
        CategoryConfig(EVENTS, f"{BASE_URL}events.html", "events_content_cache_v1"),
        CategoryConfig(BOOKSTORE, f"{BASE_URL}bookstore.html", "bookstore_content_cache_v1"),
        CategoryConfig(DONATE, f"{BASE_URL}donate.html", "donate_content_cache_v1"),
        CategoryConfig(ADMISSIONS, f"{BASE_URL}admissions1.html", "admissions_content_cache_v2"),
        CategoryConfig(CONTACT, f"{BASE_URL}contact-us1.html", "contact_content_cache_v1"),
        CategoryConfig(CURRICULAR_CLASSES, f"{BASE_URL}curricular-classes.html",
                       "curricular_classes_cache_v1"),
        CategoryConfig(MUSIC_CLASSES, f"{BASE_URL}music-classes.html", "music_classes_cache_v1"),
        CategoryConfig(SUMMER_CAMP, f"{BASE_URL}summer-camp.html", "summer_camp_cache_v1"),
        # Hand-maintained table, no page behind it; the URL is the published PDF
        CategoryConfig(
            CALENDAR,
            f"{BASE_URL}uploads/5/2/1/3/52135817/v9_final_dates_vp_calendar_2025_n_2024.11.12.pdf",
            "calendar_content_cache_v1",
            CALENDAR_CACHE_DURATION,
        ),
    )
}


def refresh_timestamp_key(category: str) -> str:
    """Store key holding the last DailyRefresh run for a category."""
    return f"last_{category}_refresh_timestamp"


# --- Organization keywords (lowercase) ---
ORGANIZATION_NAME = "vivekananda vidyapith"
STREET_KEYWORD = "hinchman"
CITY_KEYWORD = "wayne"

# Fixed thumbnails; the class pages render these through scripts the
# parser never sees
UPLOADS_URL = f"{BASE_URL}uploads/5/2/1/3/52135817/"
VOCAL_THUMBNAIL_URL = f"{UPLOADS_URL}editor/screen-shot-2024-08-02-at-1-25-10-pm.png?1722619683"
TABLA_THUMBNAIL_URL = f"{UPLOADS_URL}published/6518226.jpg?1723039710"
SUMMER_CAMP_THUMBNAIL_URL = f"{UPLOADS_URL}1511582.jpg?1453641308"

# File id of the curricular classes photo inside its upload URL
CURRICULAR_THUMBNAIL_ID = "6185815"
