"""
Admissions page extractor.

The page text is four numbered sections:

    I.   New admissions status (open / closed)
    II.  For admission to kindergarten ...
    III. For admission to grades 1-5 (alternate route) ...
    IV.  Because ... beyond 5th grade ...

followed by the school's mailing address. Sections are found by their
marker lines; a regex pass over the whole text runs only when no marker
matched at all.
"""

import re
from datetime import datetime
from typing import Optional

from .config import ORGANIZATION_NAME, STREET_KEYWORD
from .locators import find_by_keyword, find_heading, resolve_url
from .logger import get_module_logger
from .normalizer import element_text, split_lines
from .rules import LineRule, classify, contains_all, contains_any
from .schemas import AdmissionsContent, utc_now

logger = get_module_logger("admissions")

SECTION_FIELDS = ('section_i', 'section_ii', 'section_iii', 'section_iv')
NUMERALS = {'section_i': 'I', 'section_ii': 'II', 'section_iii': 'III', 'section_iv': 'IV'}

# "iii." contains "ii.", so section III is tested before section II
MARKER_RULES = [
    LineRule(lambda line: 'i. new admissions' in line
             or ('new admissions' in line and 'closed' in line), 'section_i'),
    LineRule(lambda line: 'iii.' in line and ('grades' in line or '1-5' in line), 'section_iii'),
    LineRule(contains_all('ii.', 'kindergarten'), 'section_ii'),
    LineRule(lambda line: 'iv.' in line or ('beyond' in line and '5th grade' in line), 'section_iv'),
    LineRule(contains_all(ORGANIZATION_NAME, STREET_KEYWORD), 'address'),
]

# Everything up to the next numbered line
_SECTION_BODY = r'[^\n]*(?:\n(?!(?:I{1,3}|IV)\.)[^\n]*)*'
FALLBACK_PATTERNS = {
    'section_i': re.compile(rf'^I\.?\s*New\s+Admissions{_SECTION_BODY}', re.IGNORECASE | re.MULTILINE),
    'section_ii': re.compile(rf'^II\.?\s*For\s+Admission{_SECTION_BODY}', re.IGNORECASE | re.MULTILINE),
    'section_iii': re.compile(rf'^III\.?\s*For\s+Admission{_SECTION_BODY}', re.IGNORECASE | re.MULTILINE),
    'section_iv': re.compile(rf'^IV\.?\s*Because{_SECTION_BODY}', re.IGNORECASE | re.MULTILINE),
}

ADDRESS_PATTERN = re.compile(
    r'Vivekananda\s+Vidyapith\s+(?:\d+\s+)?[^\n]+\n[^\n]+\n[^\n]+',
    re.IGNORECASE,
)

KG_FORM_PHRASES = ('kg inquiry form', 'kindergarten inquiry', '2026-27 kg', 'kg inquiry')
ALTERNATE_ROUTE_FORM_PHRASES = ('alternate route inquiry', 'grades 1-5 inquiry', '2026-27 alternate')

CONTAINER_KEYWORDS = ('new admissions', 'kindergarten')


def _mentions_sections(text: str) -> bool:
    return any(keyword in text for keyword in CONTAINER_KEYWORDS)


def find_container(doc):
    """The smallest element that holds the numbered sections, else <body>."""
    heading = find_heading(doc, 'admissions')
    if heading is not None:
        current = heading.parent
        while current is not None and current.name not in ('body', '[document]'):
            if _mentions_sections(element_text(current).lower()):
                return current
            current = current.parent

    container = find_by_keyword(
        doc,
        lambda text: 'admissions' in text and _mentions_sections(text),
        selector='div.paragraph, div.wsite-text, table',
    )
    if container is not None:
        return container

    logger.debug("Admissions: no section container found, using <body>")
    return doc.body or doc


def _strip_numeral(text: str, numeral: str) -> str:
    return re.sub(rf'^{numeral}\b\.?\s*', '', text.strip(), flags=re.IGNORECASE).strip()


def sections_from_markers(lines: list[str]) -> tuple[dict, list[str]]:
    """Walk the lines once, routing each to the section opened by the last marker."""
    collected: dict[str, list[str]] = {field: [] for field in SECTION_FIELDS}
    address: list[str] = []
    current: Optional[str] = None

    for line in lines:
        field = classify(line, MARKER_RULES)
        if field == 'address':
            address.append(line)
            continue
        if field:
            current = field
        if current:
            collected[current].append(line)

    sections = {
        field: _strip_numeral('\n\n'.join(collected[field]), NUMERALS[field])
        for field in SECTION_FIELDS if collected[field]
    }
    return sections, address


def sections_from_patterns(text: str) -> dict:
    sections = {}
    for field, pattern in FALLBACK_PATTERNS.items():
        match = pattern.search(text)
        if match:
            sections[field] = _strip_numeral(match.group(0), NUMERALS[field])
    return sections


def extract_form_links(doc, base_url: str) -> dict:
    links: dict = {}
    for anchor in doc.find_all('a'):
        url = resolve_url(anchor.get('href'), base_url)
        if not url:
            continue
        text = element_text(anchor).lower()
        if 'kg_form_url' not in links and contains_any(*KG_FORM_PHRASES)(text):
            links['kg_form_url'] = url
        if 'alternate_route_form_url' not in links and contains_any(*ALTERNATE_ROUTE_FORM_PHRASES)(text):
            links['alternate_route_form_url'] = url
    return links


def extract_admissions(doc, base_url: str, fetched_at: Optional[datetime] = None) -> AdmissionsContent:
    text = element_text(find_container(doc))
    lines = split_lines(text)

    sections, address = sections_from_markers(lines)
    if not sections:
        logger.info("Admissions: no section markers found, trying pattern fallback")
        sections = sections_from_patterns(text)

    if not address:
        match = ADDRESS_PATTERN.search(text)
        if match:
            address = split_lines(match.group(0))

    return AdmissionsContent(
        **sections,
        **extract_form_links(doc, base_url),
        address_lines=address,
        fetched_at=fetched_at or utc_now(),
    )
