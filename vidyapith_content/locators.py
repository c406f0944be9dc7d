"""
Locator utilities shared by the category extractors.

Three groups of helpers:
  - anchors:  find_heading / find_by_keyword / nearest_ancestor
  - URLs:     resolve_url / strip_tracking_params / resolve_image_src
  - content:  is_content_image, and the email helpers that undo the
              "email protection" hex encoding the site's CDN applies to
              mailto links

None of these raise on odd markup or odd URLs; they return None/False.
"""

import re
from typing import Callable, Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup, Tag

from .normalizer import element_text

HEADING_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']

# Table cells and paragraph-like blocks; "div.paragraph" is the site builder's
# text widget.
KEYWORD_SCAN_SELECTOR = 'td, p, div.paragraph'

# URL / class-name tokens that mark site chrome rather than page content
CHROME_TOKENS = ('logo', 'icon', 'favicon', 'badge', 'sprite', 'avatar',
                 'social', 'footer', 'banner-ad', 'header')

CONTENT_IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.webp')

# Declared width/height at or below this is a thumbnail, button or spacer
MIN_CONTENT_IMAGE_SIZE = 120

EMAIL_SHAPE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


# --- Anchors ---

def find_heading(doc, needle: str) -> Optional[Tag]:
    """
    First heading whose text contains `needle` (case-insensitive).

    Levels are tried in order (every h1, then every h2, ...), each level in
    document order, so a page title beats a same-worded sub-heading.
    """
    lowered = needle.lower()
    for tag in HEADING_TAGS:
        for element in doc.find_all(tag):
            if lowered in element.get_text().lower():
                return element
    return None


def find_by_keyword(
    doc,
    predicate: Callable[[str], bool],
    selector: str = KEYWORD_SCAN_SELECTOR
) -> Optional[Tag]:
    """
    First element matching `selector` whose lowered, normalized text
    satisfies `predicate`. Elements are visited in document order.
    """
    for element in doc.select(selector):
        if predicate(element_text(element).lower()):
            return element
    return None


def find_all_by_keyword(
    doc,
    predicate: Callable[[str], bool],
    selector: str = KEYWORD_SCAN_SELECTOR
) -> list[Tag]:
    return [el for el in doc.select(selector) if predicate(element_text(el).lower())]


def nearest_ancestor(element: Optional[Tag], tag_name: str) -> Optional[Tag]:
    """Walk up from `element` (inclusive) to the first `tag_name`; None at the root."""
    current = element
    while current is not None and not isinstance(current, BeautifulSoup):
        if current.name == tag_name:
            return current
        current = current.parent
    return None


def next_element_sibling(element: Optional[Tag]) -> Optional[Tag]:
    """Next sibling that is a tag, skipping whitespace text nodes."""
    if element is None:
        return None
    return element.find_next_sibling()


# --- URLs ---

def resolve_url(href: Optional[str], base_url: str) -> Optional[str]:
    """
    Resolve a possibly-relative href against the page URL.

    Returns None for empty hrefs, javascript: pseudo-links and hrefs that
    cannot be parsed.
    """
    if href is None:
        return None
    trimmed = href.strip()
    if not trimmed or trimmed.lower().startswith('javascript:'):
        return None

    try:
        parts = urlsplit(trimmed)
        if parts.scheme:
            return trimmed
        return urljoin(base_url, trimmed)
    except ValueError:
        # e.g. an unbalanced IPv6 bracket in the netloc
        return None


def strip_tracking_params(url: str) -> str:
    """
    Drop the query string. The site never needs query parameters to serve a
    file, and the CDN appends cache-busting timestamps that would otherwise
    defeat de-duplication.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.query:
        return url
    return urlunsplit((parts.scheme, parts.netloc, parts.path, '', parts.fragment))


def _first_srcset_candidate(srcset: str) -> Optional[str]:
    for entry in srcset.split(','):
        entry = entry.strip()
        if entry:
            # "image-800.jpg 800w" → "image-800.jpg"
            return entry.split()[0]
    return None


def resolve_image_src(image: Tag, base_url: str) -> Optional[str]:
    """
    Absolute URL of an <img>, looking through lazy-loading attributes first.

    Order: data-src, data-original, first data-srcset/srcset candidate, src.
    Inline data: URIs are not fetchable content and return None.
    """
    src = (image.get('data-src') or '').strip()
    if not src:
        src = (image.get('data-original') or '').strip()
    if not src:
        srcset = (image.get('data-srcset') or image.get('srcset') or '').strip()
        if srcset:
            src = _first_srcset_candidate(srcset) or ''
    if not src:
        src = (image.get('src') or '').strip()

    if not src or src.lower().startswith('data:'):
        return None

    return resolve_url(src, base_url)


# --- Content vs chrome ---

def _class_string(node) -> str:
    if not isinstance(node, Tag) or isinstance(node, BeautifulSoup):
        return ''
    classes = node.get('class') or []
    if isinstance(classes, str):
        return classes
    return ' '.join(classes)


def _declared_size(value) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        # "100%", "auto" and friends say nothing about the pixel size
        return None


def _url_extension_allowed(url: str) -> bool:
    try:
        path = urlsplit(url).path.lower()
    except ValueError:
        return False
    return path.endswith(CONTENT_IMAGE_EXTENSIONS)


def is_content_image(image: Tag, url: str) -> bool:
    """
    Decide whether an image is page content (a photo worth showing) or
    chrome (logo, icon, social button, header strip).

    Tuned for precision: a legitimate small photo may be rejected, UI chrome
    must not get through.
    """
    lower_url = url.lower()
    if any(token in lower_url for token in CHROME_TOKENS):
        return False

    parent = image.parent
    grandparent = parent.parent if parent is not None else None
    combined_classes = ' '.join(
        c for c in (_class_string(image), _class_string(parent), _class_string(grandparent)) if c
    ).lower()
    if any(token in combined_classes for token in CHROME_TOKENS):
        return False

    for attr in ('width', 'height'):
        size = _declared_size(image.get(attr))
        if size is not None and size <= MIN_CONTENT_IMAGE_SIZE:
            return False

    return _url_extension_allowed(url)


# --- Emails ---

def looks_like_email(value: Optional[str]) -> bool:
    if value is None:
        return False
    return bool(EMAIL_SHAPE.match(value.strip()))


def decode_protected_email(encoded: Optional[str]) -> Optional[str]:
    """
    Decode a CDN-protected email payload.

    The payload is hex: the first byte is an XOR key, every following byte
    XORed with the key gives one character of the address.

    Returns None for odd-length, non-hex or too-short input, and when the
    decoded text is not shaped like an email.
    """
    if not encoded or len(encoded) < 4 or len(encoded) % 2:
        return None

    try:
        key = int(encoded[:2], 16)
        decoded = ''.join(
            chr(int(encoded[i:i + 2], 16) ^ key)
            for i in range(2, len(encoded), 2)
        )
    except ValueError:
        return None

    return decoded if looks_like_email(decoded) else None


def email_from_anchor(anchor: Tag) -> Optional[str]:
    """
    Pull an email address out of an <a>, however the page encoded it.

    Tries, in order: anchor text, mailto: href, protected payload after '#'
    in the href, data-cfemail on the anchor or any descendant.
    """
    text = element_text(anchor).strip()
    if looks_like_email(text):
        return text

    href = (anchor.get('href') or '').strip()
    if href.lower().startswith('mailto:'):
        address = href[len('mailto:'):].split('?', 1)[0].strip()
        if looks_like_email(address):
            return address

    if '#' in href:
        decoded = decode_protected_email(href.rsplit('#', 1)[1])
        if decoded:
            return decoded

    protected = [anchor] + anchor.find_all(attrs={'data-cfemail': True})
    for node in protected:
        decoded = decode_protected_email(node.get('data-cfemail'))
        if decoded:
            return decoded

    return None
