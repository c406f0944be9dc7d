"""
Donate page extractor.

Layout on the site: an intro paragraph, then a two-cell table. One cell is
the Zelle box (instruction, email link, QR code); the other lists every other
way to give (check by mail, PayPal Giving Fund, credit card, matching grants).
"""

from datetime import datetime
from typing import Optional

from .config import ORGANIZATION_NAME
from .locators import email_from_anchor, find_by_keyword, resolve_image_src, resolve_url
from .logger import get_module_logger
from .normalizer import collapse_whitespace, element_lines
from .rules import LineRule, classify, contains_all, starts_with_any
from .schemas import DonateContent, utc_now

logger = get_module_logger("donate")

CELL_SELECTOR = 'table tr td'

OTHER_METHOD_KEYWORDS = ('paypal', 'credit card', 'matching grant', 'please mail your donation')

# Lines of the other-methods cell. Notes come before instructions: a
# "Please note ... PayPal Giving Fund ..." line is fine print, not the
# instruction.
METHOD_LINE_RULES = [
    LineRule(contains_all('to donate by check'), 'check_instruction'),
    LineRule(lambda line: 'paypal giving fund' in line and line.startswith('please note'),
             'paypal_giving_note'),
    LineRule(contains_all('paypal giving fund'), 'paypal_giving_instruction'),
    LineRule(lambda line: 'credit card' in line and line.startswith('please note'),
             'credit_card_note'),
    LineRule(contains_all('credit card'), 'credit_card_instruction'),
    LineRule(contains_all('matching', 'grant'), 'matching_grant_instruction'),
]

# Lines that end the mailing address following the check instruction
ADDRESS_END_RULES = [
    LineRule(starts_with_any('to donate online', 'to donate by credit card',
                             'if your company', 'please note'), 'end'),
]

# Checked against the resolved, lowered URL; first match per field wins
LINK_RULES = [
    LineRule(contains_all('paypal.com', 'fundraiser'), 'paypal_giving_url'),
    LineRule(contains_all('paypal.com', 'donate'), 'credit_card_url'),
    LineRule(contains_all('docs.google.com/forms'), 'matching_form_url'),
]


def extract_intro(doc) -> list[str]:
    intro = find_by_keyword(
        doc,
        lambda text: f'{ORGANIZATION_NAME} relies' in text or ('donations' in text and bool(text.strip())),
        selector='div.paragraph, p',
    )
    return element_lines(intro)


def extract_zelle(doc, base_url: str) -> dict:
    cell = find_by_keyword(doc, lambda text: 'zelle' in text, selector=CELL_SELECTOR)
    if cell is None:
        logger.info("Donate: no Zelle cell found")
        return {}

    lines = element_lines(cell)
    instruction = next((line for line in lines if 'zelle' in line.lower()), None)
    if instruction is None and lines:
        instruction = lines[0]

    email = None
    for anchor in cell.find_all('a'):
        email = email_from_anchor(anchor)
        if email:
            break

    image = cell.find('img')
    qr_image_url = resolve_image_src(image, base_url) if image is not None else None

    return {
        'zelle_email': email,
        'zelle_instruction': instruction,
        'zelle_qr_image_url': qr_image_url,
    }


def extract_other_methods(doc, base_url: str) -> dict:
    cell = find_by_keyword(
        doc,
        lambda text: any(keyword in text for keyword in OTHER_METHOD_KEYWORDS),
        selector=CELL_SELECTOR,
    )
    if cell is None:
        logger.info("Donate: no other-methods cell found")
        return {}

    fields: dict = {}
    address: list[str] = []
    capturing_address = False

    for line in element_lines(cell):
        field = classify(line, METHOD_LINE_RULES)

        if field == 'check_instruction':
            fields.setdefault(field, line)
            capturing_address = True
            continue

        if capturing_address:
            if classify(line, ADDRESS_END_RULES) is None:
                address.append(collapse_whitespace(line))
                continue
            capturing_address = False

        if field:
            fields.setdefault(field, line)

    for anchor in cell.find_all('a'):
        url = resolve_url(anchor.get('href'), base_url)
        if not url:
            continue
        field = classify(url, LINK_RULES)
        if field:
            fields.setdefault(field, url)

    fields['check_mailing_address'] = [line for line in address if line]
    return fields


def extract_donate(doc, base_url: str, fetched_at: Optional[datetime] = None) -> DonateContent:
    return DonateContent(
        intro_paragraphs=extract_intro(doc),
        **extract_zelle(doc, base_url),
        **extract_other_methods(doc, base_url),
        fetched_at=fetched_at or utc_now(),
    )
