"""
Ordered line-classification tables.

Extractors that sort the lines of a text block into fields (donation methods,
admissions sections, bookstore sections) describe their rules as a list of
LineRule entries instead of an if/elif ladder. Rules are tried in order and
the first one whose predicate accepts the lowered line decides the field.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional


@dataclass(frozen=True)
class LineRule:
    """Route a line to `field` when `predicate(lowered_line)` is true."""
    predicate: Callable[[str], bool]
    field: str


def contains_all(*needles: str) -> Callable[[str], bool]:
    return lambda line: all(n in line for n in needles)


def contains_any(*needles: str) -> Callable[[str], bool]:
    return lambda line: any(n in line for n in needles)


def starts_with_any(*prefixes: str) -> Callable[[str], bool]:
    return lambda line: line.startswith(prefixes)


def classify(line: str, rules: Iterable[LineRule]) -> Optional[str]:
    """Field name of the first matching rule, or None for an unclassified line."""
    lowered = line.lower()
    for rule in rules:
        if rule.predicate(lowered):
            return rule.field
    return None
