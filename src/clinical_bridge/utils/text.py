# ============================================================================
# src/clinical_bridge/utils/text.py
# ============================================================================
"""
Text Normalization Utilities

Cleans up free text coming from upstream payloads:
- HTML fragments in pathology answers (<br/> line breaks, entities)
- Blank strings that should count as absent
"""

import html
import re
from typing import Iterable, Optional

_BREAK_RE = re.compile(r'<br\s*/?>', re.IGNORECASE)
_TAG_RE = re.compile(r'<[^>]+>')


def clean_html(raw: Optional[str]) -> Optional[str]:
    """
    Convert a small HTML fragment to plain text.

    <br/> becomes a newline, other tags are dropped and character
    entities are decoded. Returns None for blank input.
    """
    if raw is None:
        return None
    text = _BREAK_RE.sub("\n", raw)
    text = _TAG_RE.sub("", text)
    text = html.unescape(text).strip()
    return text or None


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Trimmed value, or None when blank."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def first_present(*values: Optional[str]) -> Optional[str]:
    """First value that is not None and not blank."""
    for value in values:
        cleaned = blank_to_none(value)
        if cleaned is not None:
            return cleaned
    return None


def join_present(parts: Iterable[Optional[str]], separator: str = " ") -> str:
    """Join the non-blank parts with separator."""
    return separator.join(p.strip() for p in parts if p is not None and p.strip())


def normalize_cpr(cpr: Optional[str]) -> Optional[str]:
    """CPR number without dashes or surrounding blanks."""
    cpr = blank_to_none(cpr)
    if cpr is None:
        return None
    return cpr.replace("-", "") or None
