"""
School calendar, maintained by hand from the published calendar PDF.

No network: build() turns the table below into a CalendarContent. The
service still caches the result (7 days) so callers get the same
fetched_at semantics as every other category.

Row flags:
  S  held by the school (is_institution_event)
  H  public holiday (is_public_holiday)
  R  Indian festival / regional calendar date (is_regional_calendar_date)
"""

from datetime import date, datetime
from typing import Callable, Optional

from .logger import get_module_logger
from .schemas import CalendarContent, CalendarEvent, month_key, utc_now

logger = get_module_logger("calendar_source")

FLAG_FIELDS = {
    'S': 'is_institution_event',
    'H': 'is_public_holiday',
    'R': 'is_regional_calendar_date',
}

# (year, month, day, title, flags)
CALENDAR_ROWS = [
    # --- January 2025 ---
    (2025, 1, 1, "New Year's Day", 'H'),
    (2025, 1, 1, 'Kalpataru Day', 'S'),
    (2025, 1, 1, 'Pooja / Flower Offering', 'S'),
    (2025, 1, 2, 'Last Day of Hanukkah', 'H'),
    (2025, 1, 4, 'Vidyapith Reopens', 'S'),
    (2025, 1, 4, 'YOUTH DAY-III (Gr. 6-12)', 'S'),
    (2025, 1, 5, 'Vidyapith Reopens', 'S'),
    (2025, 1, 5, 'YOUTH DAY-IV (Gr. 6-12)', 'S'),
    (2025, 1, 5, "Swami Saradananda's Birthday", 'R'),
    (2025, 1, 9, "Flower Offering for Sw. Vivekananda's birthday", 'S'),
    (2025, 1, 11, 'YOUTH DAY-V (Gr.3-5)', 'S'),
    (2025, 1, 12, 'YOUTH DAY-VI (Gr.3-5)', 'S'),
    (2025, 1, 12, "Sw. Turiyananda's Birthday", 'R'),
    (2025, 1, 12, "Swami Vivekananda's Birthday", 'S'),
    (2025, 1, 14, 'Pongal', 'R'),
    (2025, 1, 14, 'Makara Sankranti', 'R'),
    (2025, 1, 18, 'YOUTH DAY (Rain/Snow Day)', 'S'),
    (2025, 1, 19, 'YOUTH DAY (Rain/Snow Day)', 'S'),
    (2025, 1, 20, 'Martin Luther King Jr. Day', 'H'),
    (2025, 1, 21, "Swami Vivekananda's Birthday", 'R'),
    (2025, 1, 26, "India's Republic Day", 'H'),
    (2025, 1, 30, 'Mahatma Gandhi Memorial Day', 'R'),
    (2025, 1, 31, "Swami Brahmananda's Birthday", 'R'),

    # --- February 2025 ---
    (2025, 2, 2, "Sw. Trigunatitananda's Birthday", 'R'),
    (2025, 2, 2, 'Saraswati Pooja', 'R'),
    (2025, 2, 8, 'First Day of Spring Semester for Saturday Students', 'S'),
    (2025, 2, 9, 'First Day of Spring Semester for Sunday Students', 'S'),
    (2025, 2, 12, "Sw. Adibhutananda's Birthday", 'R'),
    (2025, 2, 14, "St. Valentine's Day", 'H'),
    (2025, 2, 17, "Presidents' Day", 'H'),
    (2025, 2, 20, 'Flower Offering for Maha Shivaratri', 'S'),
    (2025, 2, 22, 'Maha Shivaratri Celebration', 'S'),
    (2025, 2, 26, 'Maha Shivaratri', 'R'),
    (2025, 2, 27, "Flower Offering for Sri Ramakrishna's birthday", 'S'),

    # --- March 2025 ---
    (2025, 3, 1, "Sri Ramakrishna's Birthday & Celebration", 'S'),
    (2025, 3, 1, 'RAMADAN BEGINS', 'H'),
    (2025, 3, 5, 'ASH WEDNESDAY', 'H'),
    (2025, 3, 13, "SRI CHAITANYA'S BIRTHDAY", 'R'),
    (2025, 3, 13, 'Flower Offering for Sri Chaitanya', 'S'),
    (2025, 3, 15, "Sri Chaitanya's Birthday Celebration", 'S'),
    (2025, 3, 17, "ST. PATRICK'S DAY", 'H'),
    (2025, 3, 18, "SWAMI YOGANANDA'S BIRTHDAY", 'R'),
    (2025, 3, 23, 'GUDI PADVA', 'R'),
    (2025, 3, 23, 'CHETI CHAND', 'R'),
    (2025, 3, 23, 'YUGADI', 'R'),
    (2025, 3, 24, 'EID-AL-FITR', 'H'),

    # TODO: April through September 2025 once the calendar PDF pages for
    # those months are transcribed

    # --- October 2025 ---
    (2025, 10, 19, 'Flower Offering for Diwali', 'S'),
    (2025, 10, 19, 'Kali Pooja', 'R'),
    (2025, 10, 20, 'Diwali', 'R'),
    (2025, 10, 21, 'Annakut', 'R'),
    (2025, 10, 21, 'Bestu Varsha', 'R'),
    (2025, 10, 23, "Bhai Beej (sisters' Day)", 'R'),
    (2025, 10, 31, 'Halloween', 'H'),

    # --- November 2025 ---
    (2025, 11, 2, "SWAMI SUBCDHANANDA'S BIRTHDAY", 'R'),
    (2025, 11, 4, "SWAMI VINANANANDA'S BIRTHDAY", 'R'),
    (2025, 11, 4, 'ELECTION DAY', 'H'),
    (2025, 11, 8, 'Diwali Function', 'S'),
    (2025, 11, 23, 'Vidyapith Closed for Thanksgiving', 'S'),
    (2025, 11, 27, 'Thanksgiving Family Get-together', 'S'),
    (2025, 11, 27, 'THANKSGIVING DAY', 'H'),
    (2025, 11, 29, 'Vidyapith Closed for Thanksgiving', 'S'),
    (2025, 11, 29, "SWAMI PREMANANDA'S BIRTHDAY", 'R'),

    # --- December 2025 ---
    (2025, 12, 1, 'Gita Jayanti', 'R'),
    (2025, 12, 6, 'Gita Jayanti Celebration', 'S'),
    (2025, 12, 11, "Holy Mother's Birthday", 'R'),
    (2025, 12, 11, "Flower Offering for Holy Mother's birthday", 'S'),
    (2025, 12, 13, "Holy Mother's Birthday Celebration", 'S'),
    (2025, 12, 15, 'Hanukkah Begins', 'H'),
    (2025, 12, 15, "Swami Shivañanda's Birthday", 'R'),
    (2025, 12, 20, 'Christmas Celebration - YOUTH DAY 1', 'S'),
    (2025, 12, 25, 'Christmas Celebration', 'S'),
    (2025, 12, 25, 'YOUTH DAY II', 'S'),
    (2025, 12, 25, 'First Day of Winter', 'H'),
    (2025, 12, 23, 'Hanukkah Ends', 'H'),
    (2025, 12, 24, 'Christmas Eve', 'H'),
    (2025, 12, 25, 'Christmas Day', 'H'),
    (2025, 12, 26, 'Kwanzaa', 'H'),
    (2025, 12, 27, 'Vidyapith Closed for holidays', 'S'),
    (2025, 12, 31, "New Year's Eve", 'H'),

    # --- January 2026 ---
    (2026, 1, 1, "New Year's Day", 'H'),
    (2026, 1, 1, 'Kalpataru Day', 'S'),
    (2026, 1, 1, 'Pooja / Flower Offering', 'S'),
    (2026, 1, 3, 'Vidyapith Closed for holidays', 'S'),
    (2026, 1, 8, "Flower Offering for Sw. Vivekananda's birthday", 'S'),
    (2026, 1, 9, "Swami Vivekananda's Birthday", 'R'),
    (2026, 1, 10, 'Vidyapith Reopens', 'S'),
    (2026, 1, 10, 'YOUTH DAY-III (Gr. 6-12)', 'S'),
    (2026, 1, 11, 'Vidyapith Reopens', 'S'),
    (2026, 1, 11, 'YOUTH DAY-IV (Gr. 6-12)', 'S'),
    (2026, 1, 12, "Swami Vivekananda's Birthday", 'S'),
    (2026, 1, 14, 'Pongal', 'R'),
    (2026, 1, 14, 'Makara Sankranti', 'R'),
    (2026, 1, 17, 'YOUTH DAY-V (Gr.3-5)', 'S'),
    (2026, 1, 18, 'YOUTH DAY-VI (Gr.3-5)', 'S'),
    (2026, 1, 19, 'YOUTH DAY (Rain/Snow Day)', 'S'),
    (2026, 1, 20, "Swami Saradananda's Birthday", 'R'),
    (2026, 1, 25, 'YOUTH DAY (Rain/Snow Day)', 'S'),
    (2026, 1, 26, "India's Republic Day", 'H'),
    (2026, 1, 30, 'Mahatma Gandhi Memorial Day', 'R'),
]


def group_by_month(rows) -> dict[int, list[CalendarEvent]]:
    """
    Build CalendarEvents from (year, month, day, title, flags) rows, keyed by
    year*100+month. Rows with an impossible date are skipped.
    """
    events_by_month: dict[int, list[CalendarEvent]] = {}
    for year, month, day, title, flags in rows:
        try:
            event_date = date(year, month, day)
        except ValueError as e:
            logger.warning(f"Skipping calendar row '{title}' ({year}-{month}-{day}): {e}")
            continue

        event = CalendarEvent(
            date=event_date,
            title=title,
            **{FLAG_FIELDS[flag]: True for flag in flags},
        )
        events_by_month.setdefault(month_key(year, month), []).append(event)
    return events_by_month


class CalendarSource:
    """Serves the hand-maintained calendar table as a CalendarContent record."""

    def __init__(self, rows=None, clock: Optional[Callable[[], datetime]] = None):
        self.rows = CALENDAR_ROWS if rows is None else rows
        self.clock = clock or utc_now

    def build(self) -> CalendarContent:
        events_by_month = group_by_month(self.rows)
        total = sum(len(events) for events in events_by_month.values())
        logger.debug(f"Calendar built: {total} events across {len(events_by_month)} months")
        return CalendarContent(events_by_month=events_by_month, fetched_at=self.clock())
