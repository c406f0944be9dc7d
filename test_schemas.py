"""Tests for the content records: JSON round trips, defaults and invariants."""

import json
from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from vidyapith_content.schemas import (
    EPOCH,
    AdmissionsContent,
    BookstoreContent,
    CalendarContent,
    CalendarEvent,
    ClassSection,
    ContactContent,
    CurricularClassesContent,
    DonateContent,
    Event,
    EventsContent,
    HomepageContent,
    MusicClassesContent,
    MusicClassSection,
    SummerCampContent,
    ThoughtOfTheDay,
    UpcomingEvent,
    month_key,
)

FETCHED_AT = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


class TestRoundTrip:

    @pytest.mark.parametrize("record_type", [
        HomepageContent,
        EventsContent,
        BookstoreContent,
        DonateContent,
        AdmissionsContent,
        ContactContent,
        SummerCampContent,
        CalendarContent,
    ])
    def test_record_with_nothing_found(self, record_type):
        record = record_type()
        assert record_type.from_json(record.to_json()) == record

    def test_homepage(self):
        record = HomepageContent(
            thought_of_the_day=ThoughtOfTheDay(text="Arise, awake", author="Swami Vivekananda"),
            upcoming_events=[UpcomingEvent(title="Picnic", details="Sat, Jun 7")],
            carousel_images=["https://www.vidyapith.org/uploads/a.jpg"],
            fetched_at=FETCHED_AT,
        )
        assert HomepageContent.from_json(record.to_json()) == record

    def test_events(self):
        record = EventsContent(
            events=[Event(title="Diwali", image_url="https://x.org/a.jpg", description="Lights")],
            fetched_at=FETCHED_AT,
        )
        assert EventsContent.from_json(record.to_json()) == record

    def test_class_listings(self):
        curricular = CurricularClassesContent(
            youngsters_section=ClassSection(title="Classes for Youngsters", schedule="Saturdays"),
            adults_section=ClassSection(title="Classes for Adults"),
            fetched_at=FETCHED_AT,
        )
        music = MusicClassesContent(
            vocal_section=MusicClassSection(title="Vocal", teachers="Sri A"),
            tabla_section=MusicClassSection(title="Tabla", form_url="https://x.org/form"),
        )
        assert CurricularClassesContent.from_json(curricular.to_json()) == curricular
        assert MusicClassesContent.from_json(music.to_json()) == music

    def test_calendar_keys_survive_json(self):
        record = CalendarContent(
            events_by_month={
                202501: [CalendarEvent(date=date(2025, 1, 1), title="Kalpataru Day",
                                       is_institution_event=True)],
            },
            fetched_at=FETCHED_AT,
        )
        restored = CalendarContent.from_json(record.to_json())
        assert restored == record
        assert list(restored.events_by_month) == [202501]


class TestWireFormat:

    def test_camel_case_keys(self):
        data = json.loads(DonateContent(zelle_email="pay@org.org", fetched_at=FETCHED_AT).to_json())
        assert data["zelleEmail"] == "pay@org.org"
        assert data["checkMailingAddress"] == []
        assert data["fetchedAt"].startswith("2025-03-01T09:30:00")

    def test_snake_case_names_accepted(self):
        record = HomepageContent.model_validate({"carousel_images": ["a.jpg"]})
        assert record.carousel_images == ["a.jpg"]

    def test_missing_timestamp_is_epoch(self):
        assert ContactContent.from_json("{}").fetched_at == EPOCH

    def test_naive_timestamp_read_as_utc(self):
        record = ContactContent.from_json('{"fetchedAt": "2025-03-01T09:30:00"}')
        assert record.fetched_at == FETCHED_AT
        assert record.fetched_at.tzinfo is not None

    def test_corrupt_json_raises(self):
        with pytest.raises(ValidationError):
            EventsContent.from_json("{not json")

    def test_wrong_shape_raises(self):
        with pytest.raises(ValidationError):
            EventsContent.from_json('{"events": "none"}')


class TestRecords:

    def test_records_are_frozen(self):
        record = BookstoreContent(title="Bookstore")
        with pytest.raises(ValidationError):
            record.title = "Other"

    def test_donation_methods_skip_empty(self):
        record = DonateContent(check_instruction="To donate by check, mail to:")
        methods = record.methods()
        assert list(methods) == ["check"]
        assert methods["check"].instruction == "To donate by check, mail to:"

    def test_zelle_method_links_email(self):
        method = DonateContent(zelle_email="pay@org.org").methods()["zelle"]
        assert method.url == "mailto:pay@org.org"
        assert method.instruction is None

    def test_admissions_sections_in_page_order(self):
        record = AdmissionsContent(section_iv="Four", section_i="One")
        assert record.sections() == ["One", "Four"]

    def test_summer_camp_title_default(self):
        assert SummerCampContent().title == "Summer Camp"


class TestCalendarContent:

    def test_month_key(self):
        assert month_key(2025, 1) == 202501
        assert month_key(2026, 12) == 202612

    def test_event_under_wrong_month_rejected(self):
        with pytest.raises(ValidationError):
            CalendarContent(events_by_month={
                202501: [CalendarEvent(date=date(2025, 2, 1), title="Misfiled")],
            })

    def test_lookups(self):
        first = CalendarEvent(date=date(2025, 1, 1), title="New Year's Day", is_public_holiday=True)
        second = CalendarEvent(date=date(2025, 1, 14), title="Pongal", is_regional_calendar_date=True)
        record = CalendarContent(events_by_month={202501: [first, second]})

        assert record.events_for_month(1, 2025) == [first, second]
        assert record.events_for_date(date(2025, 1, 14)) == [second]
        assert record.events_for_month(2, 2025) == []
        assert record.events_for_date(date(2025, 2, 1)) == []
