"""
HTML normalizer: markup in, clean line-oriented plain text out.

Every category extractor goes through this module, both to parse a fetched
page (parse_document) and to turn an element's inner HTML into text lines
(clean_html / element_text).

Design principle: NEVER FAIL on bad HTML. Malformed markup degrades to
best-effort text; nothing in here raises on content.
"""

import re
from typing import Union

from bs4 import BeautifulSoup, Comment

from .logger import get_module_logger

logger = get_module_logger("normalizer")

# One or more adjacent line-break tags: <br>, <BR/>, <br class="x" />, </br>
LINE_BREAK_PATTERN = re.compile(r'(?:<\s*/?\s*br\b[^>]*>)+', re.IGNORECASE)

NEWLINE_RUN = re.compile(r'\n+')
WHITESPACE_RUN = re.compile(r'\s+')

# Elements whose text never reaches the reader
NON_CONTENT_ELEMENTS = ['script', 'style', 'noscript', 'template']

# WHATWG encoding spec: browsers silently remap these charsets.
# https://encoding.spec.whatwg.org/#names-and-labels
# Every browser treats "iso-8859-1" as "windows-1252"; the site's older pages
# declare latin-1 but contain curly quotes in the 0x80–0x9F range.
WHATWG_CHARSET_MAP = {
    'iso-8859-1': 'windows-1252',
    'iso8859-1': 'windows-1252',
    'iso88591': 'windows-1252',
    'latin-1': 'windows-1252',
    'latin1': 'windows-1252',
    'us-ascii': 'windows-1252',
    'ascii': 'windows-1252',
    'iso-8859-9': 'windows-1254',
    'iso-8859-11': 'windows-874',
}


def detect_charset(raw_bytes: bytes) -> str:
    """
    Detect charset from raw HTML bytes by scanning the first 2048 bytes
    for <meta charset=...> or <meta http-equiv="Content-Type" content="...; charset=...">.

    Returns the browser-equivalent charset or 'utf-8' as default.
    """
    # The HTML spec puts charset declarations in the first 1024 bytes
    head_str = raw_bytes[:2048].decode('ascii', errors='ignore')

    charset = None

    m = re.search(r'<meta[^>]+charset=["\']?\s*([^\s"\';>]+)', head_str, re.IGNORECASE)
    if m:
        charset = m.group(1).strip().lower()

    if not charset:
        m = re.search(
            r'<meta[^>]+content=["\'][^"\']*charset=([^\s"\';>]+)',
            head_str, re.IGNORECASE
        )
        if m:
            charset = m.group(1).strip().lower()

    if not charset:
        return 'utf-8'

    return WHATWG_CHARSET_MAP.get(charset, charset)


def decode_body(raw_bytes: bytes) -> str:
    """Decode a response body with its declared charset; bad bytes become U+FFFD."""
    charset = detect_charset(raw_bytes)
    try:
        return raw_bytes.decode(charset, errors='replace')
    except LookupError:
        logger.warning(f"Unknown charset '{charset}', decoding as utf-8")
        return raw_bytes.decode('utf-8', errors='replace')


def sanitize_markup(html: str) -> str:
    """
    String-level fixes applied before parsing.

    Only the malformations that make parsers drop text are handled: NULL
    bytes, stray control characters and \\r line endings.
    """
    sanitized = html.replace('\x00', '')
    sanitized = sanitized.replace('\r\n', '\n').replace('\r', '\n')

    control_chars = ''.join(chr(c) for c in range(32) if c not in (9, 10, 13))
    if any(c in sanitized for c in control_chars):
        sanitized = sanitized.translate(str.maketrans('', '', control_chars))

    return sanitized


def _parse(markup: str) -> BeautifulSoup:
    """
    Parser fallback chain: html5lib → lxml → html.parser.

    html5lib implements the WHATWG tree builder, so misnested and unclosed
    tags end up where a browser would put them. lxml and the built-in parser
    are only reached if html5lib itself blows up.
    """
    try:
        return BeautifulSoup(markup, 'html5lib')
    except Exception as e:
        logger.warning(f"html5lib parsing failed, trying lxml: {e}")

    try:
        return BeautifulSoup(markup, 'lxml')
    except Exception as e:
        logger.warning(f"lxml parsing also failed: {e}")

    # Last resort: the built-in parser needs no C extensions
    return BeautifulSoup(markup, 'html.parser')


def _strip_non_content(soup: BeautifulSoup) -> BeautifulSoup:
    """Remove comments and script/style bodies so get_text() sees only visible text."""
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    for element in soup.find_all(NON_CONTENT_ELEMENTS):
        element.decompose()
    return soup


def parse_document(source: Union[bytes, str]) -> BeautifulSoup:
    """
    Parse a full page for the extractors.

    Args:
        source: Response body bytes (charset sniffed from <meta>) or text

    Returns:
        BeautifulSoup tree with comments and script/style content removed
    """
    html = decode_body(source) if isinstance(source, bytes) else source
    soup = _parse(sanitize_markup(html))
    return _strip_non_content(soup)


def split_lines(text: str) -> list[str]:
    """Split on newline runs, trim every line, drop the empty ones."""
    return [line.strip() for line in NEWLINE_RUN.split(text) if line.strip()]


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RUN.sub(' ', text).strip()


def clean_html(fragment: str) -> str:
    """
    Convert an HTML fragment to clean plain text, one visual line per line.

    1. Runs of <br> become a single newline
    2. Tags are dropped, only text nodes are kept
    3. NBSP becomes a space, zero-width spaces are removed
    4. \\r becomes \\n
    5. Lines are trimmed, empty lines dropped, rejoined with \\n

    Example:
        '<p>Hello <strong>world</strong>!</p><br>Next line' → 'Hello world!\\nNext line'
    """
    if not fragment:
        return ''

    with_breaks = LINE_BREAK_PATTERN.sub('\n', fragment)
    text = _strip_non_content(_parse(with_breaks)).get_text()

    text = (text
            .replace('\u00a0', ' ')
            .replace('\u200b', '')
            .replace('\r', '\n'))

    return '\n'.join(split_lines(text))


def element_text(element) -> str:
    """clean_html() of an element's inner HTML; '' for a missing element."""
    if element is None:
        return ''
    return clean_html(element.decode_contents())


def element_lines(element) -> list[str]:
    return split_lines(element_text(element))
