"""
Contact page extractor.
"""

import re
from datetime import datetime
from typing import Optional

from .config import CITY_KEYWORD, STREET_KEYWORD
from .locators import email_from_anchor, find_by_keyword, resolve_image_src, resolve_url
from .logger import get_module_logger
from .normalizer import collapse_whitespace, element_lines, element_text
from .schemas import ContactContent, utc_now

logger = get_module_logger("contact")

PHONE_PATTERN = re.compile(r'\(?\b\d{3}\)?[-.\s]\d{3}[-.]\d{4}\b')
ABSENCE_PATTERN = re.compile(r'To report an.*?Absence.*?Tardy.*?8:30am', re.IGNORECASE | re.DOTALL)
NOTICE_PATTERN = re.compile(r'All teachers can be reached.*?email addresses.*?Thank you',
                            re.IGNORECASE | re.DOTALL)

ADDRESS_LINE_KEYWORDS = ('vivekananda', STREET_KEYWORD, CITY_KEYWORD)
HERO_IMAGE_DENY = ('logo', 'icon', 'favicon')
FORM_URL_MARKERS = ('docs.google.com', 'form')


def extract_address(doc) -> list[str]:
    cell = find_by_keyword(
        doc,
        lambda text: STREET_KEYWORD in text and CITY_KEYWORD in text,
        selector='table tr td',
    )
    lines: list[str] = []
    for line in element_lines(cell):
        lowered = line.lower()
        if any(keyword in lowered for keyword in ADDRESS_LINE_KEYWORDS) and line not in lines:
            lines.append(line)
    return lines


def _first_match_or_element(pattern: re.Pattern, page_text: str, doc, selector: str, keywords) -> Optional[str]:
    """Regex over the page text, else the first `selector` element mentioning a keyword."""
    match = pattern.search(page_text)
    if match:
        return match.group(0).strip()
    element = find_by_keyword(doc, lambda text: any(k in text for k in keywords), selector=selector)
    return element_text(element) or None


def extract_hero_image(doc, base_url: str) -> Optional[str]:
    for image in doc.find_all('img'):
        url = resolve_image_src(image, base_url)
        if url and not any(token in url.lower() for token in HERO_IMAGE_DENY):
            return url
    return None


def _is_form_url(url: str) -> bool:
    return any(marker in url for marker in FORM_URL_MARKERS)


def extract_links_and_emails(doc, base_url: str) -> dict:
    found: dict = {}
    emails: list[str] = []

    for anchor in doc.find_all('a'):
        email = email_from_anchor(anchor)
        if email and email not in emails:
            emails.append(email)

        url = resolve_url(anchor.get('href'), base_url)
        if not url:
            continue
        text = element_text(anchor).lower()
        lowered_url = url.lower()

        if 'admissions' in lowered_url and 'contact' not in lowered_url:
            found.setdefault('admissions_url', url)
        if ('monday scriptural' in text or 'scriptural class' in text) and _is_form_url(url):
            found.setdefault('monday_scriptural_class_form_url', url)
        if 'tabla' in text and _is_form_url(url):
            found.setdefault('tabla_class_form_url', url)

    registration = next(
        (e for e in emails if 'registration' in e.lower() or 'registrar' in e.lower()),
        next((e for e in emails if 'alumni' not in e.lower()), None),
    )
    alumni = next((e for e in emails if 'alumni' in e.lower()), None)

    found.update(emails=emails, registration_email=registration, alumni_email=alumni)
    return found


def extract_contact(doc, base_url: str, fetched_at: Optional[datetime] = None) -> ContactContent:
    page_text = collapse_whitespace(element_text(doc.body or doc))

    phone_match = PHONE_PATTERN.search(page_text)
    if phone_match is None:
        logger.info("Contact: no phone number found")

    return ContactContent(
        phone=phone_match.group(0) if phone_match else None,
        address_lines=extract_address(doc),
        absence_tardy_instructions=_first_match_or_element(
            ABSENCE_PATTERN, page_text, doc, 'li', ('absence', 'tardy')),
        hero_image_url=extract_hero_image(doc, base_url),
        general_notice=_first_match_or_element(
            NOTICE_PATTERN, page_text, doc, 'p', ('teachers can be reached', 'should not be sent')),
        **extract_links_and_emails(doc, base_url),
        fetched_at=fetched_at or utc_now(),
    )
