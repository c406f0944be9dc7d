"""
Events page extractor.

The page is a hand-edited list of photo + caption pairs. Most of it is a
table (photo cell, caption cell), but older sections are free-floating
images inside divs. Two strategies cover both layouts; they are tried in
EVENT_STRATEGIES order and the first one that returns any events wins.
"""

import re
from datetime import datetime
from typing import Callable, Optional

from bs4 import Tag

from .locators import is_content_image, resolve_image_src, strip_tracking_params
from .logger import get_module_logger
from .normalizer import element_lines, element_text
from .schemas import Event, EventsContent, utc_now

logger = get_module_logger("events")

LEADING_PUNCTUATION = re.compile(r'^[:\-\s]+')

MIN_CAPTION_LENGTH = 10
MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 100

MIN_CONTAINER_TEXT_LENGTH = 20
MAX_CONTAINER_DEPTH = 5
CONTAINER_TAGS = ('div', 'td', 'section')

# Caption lines that describe the photo rather than the event
PHOTO_WORDS = ('picture', 'image')
PROXIMITY_PHOTO_WORDS = PHOTO_WORDS + ('photo',)


def _accepted_image_url(image: Tag, base_url: str) -> Optional[str]:
    """Stripped URL of a content image, None for chrome or unresolvable src."""
    url = resolve_image_src(image, base_url)
    if not url:
        return None
    normalized = strip_tracking_params(url)
    return normalized if is_content_image(image, normalized) else None


def _mentions_photo(text: str, words: tuple[str, ...] = PHOTO_WORDS) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in words)


# --- Strategy 1: table rows ---

def _row_image(cells: list[Tag], base_url: str) -> Optional[str]:
    for cell in cells:
        image = cell.find('img')
        if image is None:
            continue
        url = _accepted_image_url(image, base_url)
        if url:
            return url
    return None


def _caption(cells: list[Tag]) -> Optional[tuple[str, str]]:
    """(title, description) from the first usable text cell of a row."""
    for cell in cells:
        if cell.find('img') is not None:
            continue

        lines = element_lines(cell)
        if len('\n'.join(lines)) < MIN_CAPTION_LENGTH:
            continue

        title = element_text(cell.find('strong')) or lines[0]
        title = LEADING_PUNCTUATION.sub('', title)
        if not MIN_TITLE_LENGTH <= len(title) <= MAX_TITLE_LENGTH or _mentions_photo(title):
            continue

        description_lines = [
            line for line in lines
            if LEADING_PUNCTUATION.sub('', line) != title and not _mentions_photo(line)
        ]
        return title, ' '.join(description_lines).strip() or title

    return None


def events_from_table_rows(doc, base_url: str) -> list[Event]:
    events = []
    seen = set()

    for row in doc.select('table tr'):
        cells = row.find_all('td')
        if len(cells) < 2:
            continue

        image_url = _row_image(cells, base_url)
        if image_url is None or image_url in seen:
            continue

        caption = _caption(cells)
        if caption is None:
            continue

        title, description = caption
        events.append(Event(title=title, image_url=image_url, description=description))
        seen.add(image_url)

    return events


# --- Strategy 2: image proximity ---

def _container_caption(image: Tag) -> Optional[tuple[str, str]]:
    """Walk up from the image to the first div/td/section carrying a usable caption."""
    container = image.parent
    depth = 0
    while container is not None and depth < MAX_CONTAINER_DEPTH:
        if container.name in CONTAINER_TAGS:
            lines = element_lines(container)
            text = '\n'.join(lines)
            if len(text) >= MIN_CONTAINER_TEXT_LENGTH:
                title = lines[0]
                if len(title) >= MIN_TITLE_LENGTH and not _mentions_photo(title, PROXIMITY_PHOTO_WORDS):
                    title = LEADING_PUNCTUATION.sub('', title)
                    if title:
                        description = ' '.join(lines[1:]).strip()
                        return title, description or title
        container = container.parent
        depth += 1
    return None


def events_from_image_proximity(doc, base_url: str) -> list[Event]:
    events = []
    seen = set()

    for image in doc.find_all('img'):
        image_url = _accepted_image_url(image, base_url)
        if image_url is None or image_url in seen:
            continue

        caption = _container_caption(image)
        if caption is None:
            continue

        title, description = caption
        events.append(Event(title=title, image_url=image_url, description=description))
        seen.add(image_url)

    return events


EVENT_STRATEGIES: list[tuple[str, Callable[..., list[Event]]]] = [
    ("table rows", events_from_table_rows),
    ("image proximity", events_from_image_proximity),
]


def extract_events(doc, base_url: str, fetched_at: Optional[datetime] = None) -> EventsContent:
    events: list[Event] = []
    for name, strategy in EVENT_STRATEGIES:
        events = strategy(doc, base_url)
        if events:
            logger.debug(f"Events: {len(events)} found by {name} strategy")
            break
    else:
        logger.info("Events: no strategy found any events")

    return EventsContent(events=events, fetched_at=fetched_at or utc_now())
