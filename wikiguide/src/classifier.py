"""
Map parsed sections onto the guide's semantic slots.

Headings differ between languages ("History", "História") and wikis
("Understand", "Compreenda"), so this is where keyword matching lives; the
section parser stays vocabulary-agnostic.
"""

import re
from typing import Iterable, List, Optional

from wikiguide.models import ClassifiedContent, Section

SLOT_CHAR_LIMIT = 500

INTRODUCTION_KEYWORDS = ('introduction', 'introdução')
HISTORY_KEYWORDS = ('história', 'historia', 'history', 'histoire')
OVERVIEW_KEYWORDS = ('understand', 'compreenda', 'entenda', 'overview', 'visão geral')
CULTURE_KEYWORDS = (
    'cultura', 'culture', 'tradição', 'tradições', 'tradition', 'traditions',
    'costumes', 'customs',
)
SEE_DO_KEYWORDS = (
    'see', 'do', 'veja', 'ver', 'faça', 'fazer', 'atrações', 'attractions',
    'sights', 'o que ver',
)


def _keyword_pattern(keywords: Iterable[str]) -> re.Pattern:
    # Whole-word match so "do" does not hit "Redondezas"
    alternatives = '|'.join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))
    return re.compile(rf'(?<!\w)(?:{alternatives})(?!\w)', re.IGNORECASE)


_HISTORY_RE = _keyword_pattern(HISTORY_KEYWORDS)
_OVERVIEW_RE = _keyword_pattern(OVERVIEW_KEYWORDS)
_CULTURE_RE = _keyword_pattern(CULTURE_KEYWORDS)
_SEE_DO_RE = _keyword_pattern(SEE_DO_KEYWORDS)


def is_introduction(title: str) -> bool:
    return title.strip().lower() in INTRODUCTION_KEYWORDS


def is_history(title: str) -> bool:
    return bool(_HISTORY_RE.search(title)) and not _OVERVIEW_RE.search(title)


def is_culture(title: str) -> bool:
    return bool(_CULTURE_RE.search(title)) and not _SEE_DO_RE.search(title)


def is_tourism(title: str) -> bool:
    return bool(_SEE_DO_RE.search(title)) and not _HISTORY_RE.search(title)


def truncate(text: str, limit: int = SLOT_CHAR_LIMIT) -> str:
    """Cut at a fixed character count (not at a word boundary)."""
    return text[:limit]


def classify_sections(sections: List[Section]) -> ClassifiedContent:
    """Fill summary/history/culture/tourism from ``sections`` in document order.

    First match wins for each slot, a filled slot is never revisited, and a
    section that fills one slot is not offered to the others.
    """
    slots = {'summary': None, 'history': None, 'culture': None, 'tourism': None}
    rules = (
        ('summary', is_introduction),
        ('history', is_history),
        ('culture', is_culture),
        ('tourism', is_tourism),
    )

    for section in sections:
        content = (section.content or '').strip()
        if not content:
            continue
        for slot, matches in rules:
            if slots[slot] is None and matches(section.title):
                slots[slot] = truncate(content)
                break

    return ClassifiedContent(**slots)


def first_nonempty(*values: Optional[str]) -> str:
    for value in values:
        if value:
            return value
    return ''
