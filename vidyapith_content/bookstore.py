"""
Bookstore page extractor.

The page keeps everything in one text widget:

    About Us
    The Vidyapith bookstore carries ...
    Location
    Vivekananda Vidyapith, 20 Hinchman Ave ...
    Hours
    Sundays 10am - 1pm
    Questions
    bookstore@example.org

Header lines switch the current section; the lines that follow belong to it.
"""

import re
from datetime import datetime
from typing import Optional

from .locators import find_by_keyword
from .logger import get_module_logger
from .normalizer import collapse_whitespace, element_lines, element_text
from .rules import LineRule, classify, starts_with_any
from .schemas import BookstoreContent, utc_now

logger = get_module_logger("bookstore")

DEFAULT_TITLE = "Bookstore"

EMAIL_PATTERN = re.compile(r'([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})')
LEADING_BULLET = re.compile(r'^[-\u2022]+\s*')
ABOUT_LABEL = re.compile(r'About Us\s*:?', re.IGNORECASE)

SECTION_HEADERS = [
    LineRule(starts_with_any('about us'), 'about'),
    LineRule(starts_with_any('location'), 'location'),
    LineRule(starts_with_any('hours'), 'hours'),
    LineRule(starts_with_any('questions'), 'questions'),
]


def _normalize_line(line: str) -> str:
    return LEADING_BULLET.sub('', collapse_whitespace(line)).strip()


def extract_bookstore(doc, base_url: str, fetched_at: Optional[datetime] = None) -> BookstoreContent:
    title = element_text(doc.select_one('h2.wsite-content-title')) or DEFAULT_TITLE

    info = find_by_keyword(
        doc,
        lambda text: 'about us' in text and 'bookstore' in text,
        selector='div.paragraph',
    )
    if info is None:
        logger.info("Bookstore: no info paragraph found")

    sections: dict[str, list[str]] = {'about': [], 'location': [], 'hours': [], 'questions': []}
    current: Optional[str] = None
    contact_email: Optional[str] = None

    for raw_line in element_lines(info):
        line = _normalize_line(raw_line)
        if not line:
            continue

        header = classify(line, SECTION_HEADERS)
        if header:
            current = header
            continue

        match = EMAIL_PATTERN.search(line)
        if match:
            contact_email = contact_email or match.group(1)
            continue

        if current:
            sections[current].append(line)

    about = ' '.join(sections['about'])
    if not about and info is not None:
        about = ABOUT_LABEL.sub('', element_text(info))
    about = collapse_whitespace(about)

    return BookstoreContent(
        title=title,
        about=about or None,
        location_lines=sections['location'],
        hours=sections['hours'],
        contact_email=contact_email,
        fetched_at=fetched_at or utc_now(),
    )
