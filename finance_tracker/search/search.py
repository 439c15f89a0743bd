"""
Record Search

Search patterns are regular expressions. A pattern that does not compile
is NOT an error the user sees: filtering returns no matches and
highlighting returns the plain (escaped) text.
"""

import html
import re
from collections.abc import Sequence
from typing import Optional

import structlog

from finance_tracker.models.record import TransactionRecord


logger = structlog.get_logger(__name__)

HIGHLIGHT_OPEN = "<mark>"
HIGHLIGHT_CLOSE = "</mark>"


def _is_blank(term: Optional[str]) -> bool:
    return term is None or term.strip() == ""


def compile_pattern(term: str, case_insensitive: bool = True) -> Optional[re.Pattern]:
    """Compile a search term, or return None if it is not a valid pattern."""
    flags = re.IGNORECASE if case_insensitive else 0
    try:
        return re.compile(term.strip(), flags)
    except re.error as e:
        logger.debug("invalid_search_pattern", pattern=term, error=str(e))
        return None


def is_valid_pattern(term: Optional[str]) -> bool:
    if _is_blank(term):
        return True
    return compile_pattern(term) is not None


def searchable_fields(record: TransactionRecord) -> tuple[str, ...]:
    """Text forms of the fields a search pattern is matched against."""
    return (
        record.description,
        record.category.value,
        str(record.amount),
        record.date.isoformat(),
    )


def search_records(
    records: Sequence[TransactionRecord],
    term: Optional[str],
    case_insensitive: bool = True,
) -> list[TransactionRecord]:
    """
    Filter records by a regex pattern.

    A blank term returns every record in its original order.
    An invalid pattern returns an empty list.
    """
    if _is_blank(term):
        return list(records)

    pattern = compile_pattern(term, case_insensitive)
    if pattern is None:
        return []

    return [
        record for record in records
        if any(pattern.search(text) for text in searchable_fields(record))
    ]


def highlight_text(
    text: str,
    term: Optional[str],
    case_insensitive: bool = True,
) -> str:
    """
    Wrap every match of `term` in <mark> tags.

    The text between and inside matches is HTML-escaped, so the only
    markup in the result is the highlight tags themselves.
    """
    text = str(text)
    if _is_blank(term):
        return html.escape(text)

    pattern = compile_pattern(term, case_insensitive)
    if pattern is None:
        return html.escape(text)

    parts = []
    position = 0
    for match in pattern.finditer(text):
        start, end = match.span()
        if start == end:
            continue
        parts.append(html.escape(text[position:start]))
        parts.append(HIGHLIGHT_OPEN + html.escape(text[start:end]) + HIGHLIGHT_CLOSE)
        position = end
    parts.append(html.escape(text[position:]))

    return "".join(parts)
