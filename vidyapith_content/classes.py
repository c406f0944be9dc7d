"""
Class listing extractors: curricular classes, music classes, summer camp.

Each class is described in its own table cell, headed by a bold title:

    <td><strong>Classes for Youngsters</strong><br>
        Classes are held on Saturdays ...<br> ...</td>

A page that downloads but lacks a required cell raises StructureError; the
service then falls back to the cached record like it does for a failed fetch.
"""

import re
from datetime import datetime
from typing import Callable, Optional

from bs4 import Tag

from .config import (
    CURRICULAR_CLASSES, CURRICULAR_THUMBNAIL_ID, MUSIC_CLASSES, ORGANIZATION_NAME,
    SUMMER_CAMP_THUMBNAIL_URL, TABLA_THUMBNAIL_URL, VOCAL_THUMBNAIL_URL,
)
from .exceptions import StructureError
from .locators import find_by_keyword, nearest_ancestor, resolve_image_src, resolve_url
from .logger import get_module_logger
from .normalizer import element_lines, element_text
from .schemas import (
    ClassSection, CurricularClassesContent, MusicClassesContent, MusicClassSection,
    SummerCampContent, utc_now,
)

logger = get_module_logger("classes")

SCHEDULE_PREFIXES = ('classes are held', 'scriptural study classes are held')

WEEKDAYS = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')
TIME_MARKERS = ('pm', 'am', ':', 'time')

TAUGHT_BY_PREFIX = re.compile(r'^.*?taught by', re.IGNORECASE)

# Lines of a music cell that are neither title, teachers, schedule nor prose
MUSIC_BOILERPLATE = ('taught by', 'inquiry form', 'submit')

TextMatcher = Callable[[str], bool]


def find_class_cell(doc, match: TextMatcher) -> Optional[Tag]:
    """
    The <td> describing one class: the cell around the first matching bold
    title, else the first matching table cell.
    """
    strong = find_by_keyword(doc, match, selector='strong')
    cell = nearest_ancestor(strong, 'td')
    if cell is None:
        cell = find_by_keyword(doc, match, selector='table tr td')
    return cell


def _required_cell(doc, match: TextMatcher, category: str, label: str) -> Tag:
    cell = find_class_cell(doc, match)
    if cell is None or not element_lines(cell):
        raise StructureError(
            f"Could not find the {label} section",
            category=category,
            details={"section": label},
        )
    return cell


# --- Curricular classes ---

def parse_class_section(cell: Tag) -> ClassSection:
    lines = element_lines(cell)
    schedule = None
    description_lines = []

    for line in lines[1:]:
        if schedule is None and line.lower().startswith(SCHEDULE_PREFIXES):
            schedule = line
        else:
            description_lines.append(line)

    return ClassSection(
        title=lines[0],
        schedule=schedule,
        description=' '.join(description_lines) or None,
    )


def curricular_thumbnail(doc, base_url: str) -> Optional[str]:
    images = doc.find_all('img')
    for image in images:
        url = resolve_image_src(image, base_url)
        if url and CURRICULAR_THUMBNAIL_ID in url:
            return url
    return resolve_image_src(images[0], base_url) if images else None


def extract_curricular_classes(
    doc,
    base_url: str,
    fetched_at: Optional[datetime] = None
) -> CurricularClassesContent:
    youngsters = _required_cell(doc, lambda text: 'youngsters' in text, CURRICULAR_CLASSES, 'youngsters')
    adults = _required_cell(doc, lambda text: 'adults' in text, CURRICULAR_CLASSES, 'adults')

    return CurricularClassesContent(
        youngsters_section=parse_class_section(youngsters),
        adults_section=parse_class_section(adults),
        thumbnail_url=curricular_thumbnail(doc, base_url),
        fetched_at=fetched_at or utc_now(),
    )


# --- Music classes ---

def _is_vocal(text: str) -> bool:
    return 'hindustani' in text or 'vocal' in text


def _is_tabla(text: str) -> bool:
    return 'tabla' in text


def _is_schedule_line(lowered: str) -> bool:
    return any(day in lowered for day in WEEKDAYS) and any(m in lowered for m in TIME_MARKERS)


def parse_music_section(cell: Tag, match: TextMatcher, base_url: str) -> MusicClassSection:
    lines = element_lines(cell)

    anchor = cell.select_one('a[href*="docs.google.com"]') or cell.find('a')
    form_url = resolve_url(anchor.get('href'), base_url) if anchor is not None else None

    title = next((line for line in lines if match(line.lower())), lines[0])

    teachers = next(
        (TAUGHT_BY_PREFIX.sub('', line).strip() for line in lines if 'taught by' in line.lower()),
        None,
    )
    schedule = next((line for line in lines if _is_schedule_line(line.lower())), None)

    description_lines = [
        line for line in lines
        if line != title
        and line != schedule
        and not any(word in line.lower() for word in MUSIC_BOILERPLATE)
    ]

    return MusicClassSection(
        title=title,
        teachers=teachers or None,
        schedule=schedule,
        description=' '.join(description_lines) or None,
        form_url=form_url,
    )


def extract_music_classes(
    doc,
    base_url: str,
    fetched_at: Optional[datetime] = None
) -> MusicClassesContent:
    vocal = _required_cell(doc, _is_vocal, MUSIC_CLASSES, 'vocal')
    tabla = _required_cell(doc, _is_tabla, MUSIC_CLASSES, 'tabla')

    return MusicClassesContent(
        vocal_section=parse_music_section(vocal, _is_vocal, base_url),
        tabla_section=parse_music_section(tabla, _is_tabla, base_url),
        vocal_thumbnail_url=VOCAL_THUMBNAIL_URL,
        tabla_thumbnail_url=TABLA_THUMBNAIL_URL,
        fetched_at=fetched_at or utc_now(),
    )


# --- Summer camp ---

def summer_camp_description(doc) -> Optional[str]:
    for cell in doc.select('table tr td'):
        lowered = element_text(cell).lower()
        if 'summer camp' not in lowered or 'invigorating' not in lowered:
            continue

        lines = element_lines(cell)
        title_index = next(i for i, line in enumerate(lines) if 'summer camp' in line.lower())
        description = ' '.join(lines[title_index + 1:])
        if description:
            return description

    org_word = ORGANIZATION_NAME.split()[-1]
    for cell in doc.select('table tr td'):
        lines = element_lines(cell)
        lowered = '\n'.join(lines).lower()
        if len(lines) < 2 or 'summer camp' not in lowered or org_word not in lowered:
            continue

        # Drop repeats of the "Vidyapith Summer Camp" heading
        body = [
            line for line in lines[1:]
            if not ('summer camp' in line.lower() and org_word in line.lower())
        ]
        return ' '.join(body or lines[1:])

    return None


def extract_summer_camp(
    doc,
    base_url: str,
    fetched_at: Optional[datetime] = None
) -> SummerCampContent:
    description = summer_camp_description(doc)
    if description is None:
        logger.info("Summer camp: no description found")

    return SummerCampContent(
        description=description,
        thumbnail_url=SUMMER_CAMP_THUMBNAIL_URL,
        fetched_at=fetched_at or utc_now(),
    )
