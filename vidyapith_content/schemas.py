"""
Pydantic schemas for every content category.

These are the records the extractors produce, the service caches and the
caller receives. All of them are frozen: a refresh replaces a record
wholesale instead of patching it.

Data flow:
  page bytes → normalizer → category extractor → <Category>Content
  <Category>Content ⇄ JSON string in the store (camelCase keys, ISO-8601 fetchedAt)

Optional[str] fields mean "found / not found": None is "the page did not have
it", never an empty string.
"""

from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Records read back from a cache entry without a timestamp are treated as
# infinitely old: still usable as a fallback, never fresh.
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def month_key(year: int, month: int) -> int:
    """Composite calendar bucket key, e.g. 202501 for January 2025."""
    return year * 100 + month


class ValueModel(BaseModel):
    """Base for nested value objects: frozen, camelCase on the wire."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ContentRecord(ValueModel):
    """Base for top-level records that carry a fetch timestamp."""
    fetched_at: datetime = Field(default=EPOCH)

    @field_validator("fetched_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Cache entries written by older builds carry naive timestamps
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_json(self) -> str:
        """Serialize for the persistence layer."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str):
        """Deserialize a cache entry. Raises ValueError (ValidationError) on bad input."""
        return cls.model_validate_json(raw)


# --- Homepage ---

class ThoughtOfTheDay(ValueModel):
    """Daily quote shown on the home screen."""
    text: str
    author: Optional[str] = None


class UpcomingEvent(ValueModel):
    """One line of the homepage's upcoming-events box."""
    title: str
    details: Optional[str] = None  # Date/time prefix before the last " - "


class HomepageContent(ContentRecord):
    thought_of_the_day: Optional[ThoughtOfTheDay] = None
    upcoming_events: list[UpcomingEvent] = Field(default_factory=list)
    carousel_images: list[str] = Field(default_factory=list)


# --- Events page ---

class Event(ValueModel):
    """An event card: picture plus caption text."""
    title: str
    image_url: str
    description: str


class EventsContent(ContentRecord):
    events: list[Event] = Field(default_factory=list)


# --- Bookstore ---

class BookstoreContent(ContentRecord):
    title: Optional[str] = None
    about: Optional[str] = None
    location_lines: list[str] = Field(default_factory=list)
    hours: list[str] = Field(default_factory=list)
    contact_email: Optional[str] = None


# --- Donations ---

class DonationMethod(ValueModel):
    """Instruction / link / fine print for one way of giving."""
    instruction: Optional[str] = None
    url: Optional[str] = None
    note: Optional[str] = None

    def is_empty(self) -> bool:
        return self.instruction is None and self.url is None and self.note is None


class DonateContent(ContentRecord):
    intro_paragraphs: list[str] = Field(default_factory=list)
    zelle_email: Optional[str] = None
    zelle_instruction: Optional[str] = None
    zelle_qr_image_url: Optional[str] = None
    check_instruction: Optional[str] = None
    check_mailing_address: list[str] = Field(default_factory=list)
    paypal_giving_instruction: Optional[str] = None
    paypal_giving_url: Optional[str] = None
    paypal_giving_note: Optional[str] = None
    credit_card_instruction: Optional[str] = None
    credit_card_url: Optional[str] = None
    credit_card_note: Optional[str] = None
    matching_grant_instruction: Optional[str] = None
    matching_form_url: Optional[str] = None

    def methods(self) -> dict[str, DonationMethod]:
        """
        Group the flat fields by payment method.

        Methods with nothing found are left out, so a caller can render one
        card per entry without checking every field.
        """
        grouped = {
            "zelle": DonationMethod(instruction=self.zelle_instruction,
                                    url=f"mailto:{self.zelle_email}" if self.zelle_email else None),
            "check": DonationMethod(instruction=self.check_instruction),
            "paypal_giving": DonationMethod(instruction=self.paypal_giving_instruction,
                                            url=self.paypal_giving_url,
                                            note=self.paypal_giving_note),
            "credit_card": DonationMethod(instruction=self.credit_card_instruction,
                                          url=self.credit_card_url,
                                          note=self.credit_card_note),
            "matching_grant": DonationMethod(instruction=self.matching_grant_instruction,
                                             url=self.matching_form_url),
        }
        return {name: method for name, method in grouped.items() if not method.is_empty()}


# --- Admissions ---

class AdmissionsContent(ContentRecord):
    # Sections I–IV as numbered on the admissions page, numerals stripped
    section_i: Optional[str] = None
    section_ii: Optional[str] = None
    section_iii: Optional[str] = None
    section_iv: Optional[str] = None
    kg_form_url: Optional[str] = None
    alternate_route_form_url: Optional[str] = None
    address_lines: list[str] = Field(default_factory=list)

    def sections(self) -> list[str]:
        """The sections that were found, in page order."""
        return [s for s in (self.section_i, self.section_ii,
                            self.section_iii, self.section_iv) if s is not None]


# --- Contact ---

class ContactContent(ContentRecord):
    phone: Optional[str] = None
    address_lines: list[str] = Field(default_factory=list)
    absence_tardy_instructions: Optional[str] = None
    admissions_url: Optional[str] = None
    monday_scriptural_class_form_url: Optional[str] = None
    tabla_class_form_url: Optional[str] = None
    registration_email: Optional[str] = None
    alumni_email: Optional[str] = None
    emails: list[str] = Field(default_factory=list)  # Every distinct address, page order
    hero_image_url: Optional[str] = None
    general_notice: Optional[str] = None


# --- Class listings ---

class ClassSection(ValueModel):
    """A curricular class group (youngsters or adults)."""
    title: str
    schedule: Optional[str] = None
    description: Optional[str] = None


class CurricularClassesContent(ContentRecord):
    youngsters_section: ClassSection
    adults_section: ClassSection
    thumbnail_url: Optional[str] = None


class MusicClassSection(ValueModel):
    title: str
    teachers: Optional[str] = None
    schedule: Optional[str] = None
    description: Optional[str] = None
    form_url: Optional[str] = None


class MusicClassesContent(ContentRecord):
    vocal_section: MusicClassSection
    tabla_section: MusicClassSection
    vocal_thumbnail_url: Optional[str] = None
    tabla_thumbnail_url: Optional[str] = None


class SummerCampContent(ContentRecord):
    title: str = "Summer Camp"
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None


# --- Calendar ---

class CalendarEvent(ValueModel):
    """A single dated entry on the school calendar."""
    date: date
    title: str
    description: Optional[str] = None
    is_institution_event: bool = False       # Held by the school itself
    is_public_holiday: bool = False
    is_regional_calendar_date: bool = False  # Indian festival / observance


class CalendarContent(ContentRecord):
    events_by_month: dict[int, list[CalendarEvent]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _events_match_their_month(self):
        for key, events in self.events_by_month.items():
            for event in events:
                if month_key(event.date.year, event.date.month) != key:
                    raise ValueError(
                        f"Event '{event.title}' on {event.date.isoformat()} "
                        f"filed under month key {key}"
                    )
        return self

    def events_for_month(self, month: int, year: int) -> list[CalendarEvent]:
        return list(self.events_by_month.get(month_key(year, month), []))

    def events_for_date(self, day: date) -> list[CalendarEvent]:
        return [
            event for event in self.events_for_month(day.month, day.year)
            if event.date == day
        ]
