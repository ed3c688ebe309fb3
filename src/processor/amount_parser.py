"""
Parser for localized amount text found in EDINET statement tables.
"""

import re

from .exceptions import AmountParseError


# "※1", "※1,※2" ... footnote references printed ahead of the figure
_FOOTNOTE_PATTERN = re.compile(r"※[0-9]*(?:\s*[,，、]\s*※[0-9]*)*")
_THOUSANDS_SEPARATORS = (",", "，")
_DIGIT_RUN = re.compile(r"[0-9]+")

# Japanese filings print negatives with a leading triangle instead of "-"
NEGATIVE_MARKER = "△"


def parse_amount(text: str) -> int:
    """
    Convert a localized amount cell into a signed integer.

    Args:
        text: Cell text such as ``"10,897,603"``, ``"※1 10,897,603"`` or
            ``"△1,234"``

    Returns:
        Parsed integer value

    Raises:
        AmountParseError: If the text contains no digits (labels, headers, "－")
    """
    if not text:
        raise AmountParseError("Amount text is empty")

    cleaned = _FOOTNOTE_PATTERN.sub("", str(text))
    for separator in _THOUSANDS_SEPARATORS:
        cleaned = cleaned.replace(separator, "")

    is_negative = cleaned.strip().startswith(NEGATIVE_MARKER)

    match = _DIGIT_RUN.search(cleaned)
    if not match:
        raise AmountParseError(f"No amount found in text: {text!r}")

    digits = match.group(0)
    if is_negative:
        digits = f"-{digits}"

    return int(digits)
