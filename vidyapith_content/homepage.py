"""
Homepage extractor: thought of the day, upcoming events box, photo carousel.
"""

import re
from datetime import datetime
from typing import Optional

from .locators import (
    find_heading, is_content_image, next_element_sibling,
    resolve_image_src, strip_tracking_params,
)
from .logger import get_module_logger
from .normalizer import element_lines
from .schemas import HomepageContent, ThoughtOfTheDay, UpcomingEvent, utc_now

logger = get_module_logger("homepage")

MAX_CAROUSEL_IMAGES = 8

# "Arise, awake - Swami Vivekananda" on a single line
INLINE_AUTHOR = re.compile(r'\s[-\u2013]\s*([^-\u2013]+)$')

EVENT_SEPARATOR = ' - '


def _block_after_heading(doc, needle: str):
    """The element holding a heading's content: its next sibling, else the parent's."""
    heading = find_heading(doc, needle)
    if heading is None:
        return None
    return next_element_sibling(heading) or next_element_sibling(heading.parent)


def extract_thought_of_the_day(doc) -> Optional[ThoughtOfTheDay]:
    lines = element_lines(_block_after_heading(doc, 'thought of the day'))
    if not lines:
        return None

    text = lines[0]
    author = None
    if len(lines) > 1:
        author = ' '.join(lines[1:]).strip()
    else:
        match = INLINE_AUTHOR.search(text)
        if match:
            author = match.group(1).strip()
            text = text[:match.start()].strip()

    return ThoughtOfTheDay(text=text, author=author or None)


def extract_upcoming_events(doc) -> list[UpcomingEvent]:
    """
    One event per line. The last " - " segment is the title, everything
    before it (usually the date and time) the details:
        "Sat, Mar 1 - 10am - Sri Ramakrishna's Birthday"
          → details "Sat, Mar 1 - 10am", title "Sri Ramakrishna's Birthday"
    """
    events = []
    for line in element_lines(_block_after_heading(doc, 'upcoming events')):
        segments = line.split(EVENT_SEPARATOR)
        title = segments[-1].strip()
        details = EVENT_SEPARATOR.join(segments[:-1]).strip()
        events.append(UpcomingEvent(title=title, details=details or None))
    return events


def extract_carousel_images(doc, base_url: str) -> list[str]:
    seen = set()
    images = []
    for image in doc.find_all('img'):
        url = resolve_image_src(image, base_url)
        if not url:
            continue

        normalized = strip_tracking_params(url)
        if not is_content_image(image, normalized) or normalized in seen:
            continue

        seen.add(normalized)
        images.append(normalized)
        if len(images) >= MAX_CAROUSEL_IMAGES:
            break
    return images


def extract_homepage(doc, base_url: str, fetched_at: Optional[datetime] = None) -> HomepageContent:
    thought = extract_thought_of_the_day(doc)
    upcoming = extract_upcoming_events(doc)
    carousel = extract_carousel_images(doc, base_url)

    logger.debug(
        f"Homepage: thought={'yes' if thought else 'no'}, "
        f"{len(upcoming)} upcoming events, {len(carousel)} carousel images"
    )

    return HomepageContent(
        thought_of_the_day=thought,
        upcoming_events=upcoming,
        carousel_images=carousel,
        fetched_at=fetched_at or utc_now(),
    )
