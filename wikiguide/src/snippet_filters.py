import re
from typing import Optional

# Travel-wiki practical sections interleave prose advice with verbatim
# business listings. Each predicate below recognises one shape of listing
# noise; a snippet becomes a tip only if none of them fire.

MIN_TIP_LENGTH = 50
MAX_TIP_LENGTH = 300
PARAGRAPH_DIGIT_RATIO = 0.2
LIST_ITEM_DIGIT_RATIO = 0.3

CONTACT_GLYPHS = ('✆', '☎', '☏', '📞', '✉')

_CITATION_RE = re.compile(
    r'\[\s*(?:\d+|(?:nota|note)\s*\d+|citation needed|carece de fontes\??)\s*\]',
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r'\s+')

_LISTING_PATTERNS = (
    # "Name, Street 12, (21) ..." / "Name, Street, +351 ..."
    re.compile(r'^[A-ZÀ-Ú][^.!?]+,\s*[^,]+,\s*[(+]?\d{2,3}'),
    # Business or emergency-service name, then a numbered address after the comma
    re.compile(
        r'^(?:Hotel|Hostel|Pousada|Restaurante|Restaurant|Café|Cafe|Bar|Polícia|Police|'
        r'Guarda|Hospital|Embaixada|Embassy|Consulado|Consulate)\b[^.!?]+,[^.!?]*\d'
    ),
    re.compile(
        r'^(?:Polícia|Police|Guarda|Hospital|Embaixada|Embassy|Consulado|Consulate).*\d{3}\s?\d{3}',
        re.IGNORECASE,
    ),
    # International dialling prefix in parentheses: (+55)
    re.compile(r'\(\+\d{2,3}\)'),
    # Capitalised name, address with a number, then a phone-like digit run
    re.compile(r'^[A-Z][a-zà-ú\s]+\s[\w\s,]+\d+.*\d[\d\s]{3,}\d'),
)
_LISTING_MARKUP_RE = re.compile(r'\b(?:NOCC|FORMAT|MARKER|LISTING)\b')
_PUNCTUATION_ONLY_RE = re.compile(r'^[\d\s,.\-+()✆☎☏]+$')


def strip_citations(text: str) -> str:
    """Remove bracketed citation markers like [1] and collapse whitespace."""
    if not text:
        return ''
    return _WHITESPACE_RE.sub(' ', _CITATION_RE.sub('', text)).strip()


def is_digit_heavy(text: str, ratio: float = PARAGRAPH_DIGIT_RATIO) -> bool:
    """True when more than ``ratio`` of the characters are digits."""
    if not text:
        return False
    digits = sum(1 for c in text if c.isdigit())
    return digits > len(text) * ratio


def has_contact_glyph(text: str) -> bool:
    return any(glyph in text for glyph in CONTACT_GLYPHS)


def looks_like_contact_listing(text: str) -> bool:
    """Name/address/phone shapes typical of hotel and restaurant listings."""
    return any(p.search(text) for p in _LISTING_PATTERNS)


def has_email_marker(text: str) -> bool:
    return '@' in text


def has_listing_markup(text: str) -> bool:
    """Residue of listing templates that leaked into rendered text."""
    return bool(_LISTING_MARKUP_RE.search(text))


def is_punctuation_only(text: str) -> bool:
    """Only digits, punctuation and contact glyphs (a bare phone number)."""
    return bool(_PUNCTUATION_ONLY_RE.match(text))


def is_noise(text: str, digit_ratio: float = PARAGRAPH_DIGIT_RATIO) -> bool:
    return (
        is_punctuation_only(text)
        or is_digit_heavy(text, digit_ratio)
        or has_contact_glyph(text)
        or looks_like_contact_listing(text)
        or has_email_marker(text)
        or has_listing_markup(text)
    )


def clean_tip_text(text: str, digit_ratio: float = PARAGRAPH_DIGIT_RATIO) -> Optional[str]:
    """Return the cleaned snippet if it qualifies as a tip, else None."""
    cleaned = strip_citations(text)
    if not MIN_TIP_LENGTH <= len(cleaned) <= MAX_TIP_LENGTH:
        return None
    if is_noise(cleaned, digit_ratio):
        return None
    return cleaned
