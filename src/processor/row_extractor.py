"""
Row extraction for statement tables embedded in XBRL text blocks.
"""

import html as html_entities
import logging
import re
from typing import List, Optional, Tuple

from lxml import etree, html

from .amount_parser import parse_amount
from .data_models import LineItemRow
from .exceptions import AmountParseError


logger = logging.getLogger(__name__)

UNIT_MARKER = "単位："
_UNIT_SEPARATOR = "："
_PARENTHESES = ("(", ")", "（", "）")

_TABLE_TAG = re.compile(r"<table(.*?)>", re.DOTALL)
# Tried in order; only the first form found in the <table> tag is removed
_TABLE_WIDTH_PATTERNS = (
    re.compile(r"width(.*?);"),
    re.compile(r"width(.*?)pt"),
    re.compile(r"width(.*?)px"),
)
_COLGROUP = re.compile(r"<colgroup(.*?)</colgroup>", re.DOTALL)


def clean_fragment_html(fragment: str) -> str:
    """
    Decode an escaped text block and strip presentational table sizing.

    Args:
        fragment: HTML-escaped contents of a statement text block

    Returns:
        Self-contained HTML suitable for parsing and for the HTML artifact
    """
    unescaped = html_entities.unescape(fragment)
    # Double-escaped blocks leave "&apos;" behind after the first pass
    unescaped = unescaped.replace("&apos;", "'")
    return format_html_table(unescaped)


def format_html_table(html_text: str) -> str:
    """Remove inline width from the outer ``<table>`` and drop ``<colgroup>``."""
    table_match = _TABLE_TAG.search(html_text)
    if table_match:
        table_tag = table_match.group(0)
        for pattern in _TABLE_WIDTH_PATTERNS:
            width_match = pattern.search(table_tag)
            if width_match:
                html_text = html_text.replace(
                    table_tag, table_tag.replace(width_match.group(0), "")
                )
                break

    colgroup_match = _COLGROUP.search(html_text)
    if colgroup_match:
        html_text = html_text.replace(colgroup_match.group(0), "")

    return html_text


def extract_rows(html_fragment: str) -> Tuple[List[LineItemRow], str]:
    """
    Parse statement rows from a cleaned HTML fragment.

    Args:
        html_fragment: Output of :func:`clean_fragment_html`

    Returns:
        Tuple of (line item rows in document order, detected unit string)
    """
    rows: List[LineItemRow] = []
    unit_string = ""

    for segments in iter_row_segments(html_fragment):
        if len(segments) >= 3:
            row = _build_row(segments)
            if row is not None:
                rows.append(row)
        elif len(segments) == 1 and UNIT_MARKER in segments[0]:
            detected = parse_unit_string(segments[0])
            if detected:
                unit_string = detected

    return rows, unit_string


def iter_row_segments(html_fragment: str):
    """Yield the non-empty text segments of each ``<tr>`` in document order."""
    if not html_fragment or not html_fragment.strip():
        return

    try:
        document = html.fromstring(
            html_fragment.encode("utf-8"), parser=html.HTMLParser(encoding="utf-8")
        )
    except (etree.ParserError, ValueError) as exc:
        logger.debug("Failed to parse statement HTML: %s", exc)
        return

    for tr in document.iter("tr"):
        cell_text = "\n".join(td.text_content() for td in tr.iter("td"))
        segments = [part.strip() for part in cell_text.split("\n")]
        yield [part for part in segments if part]


def parse_unit_string(text: str) -> str:
    """Return ``"百万円"`` for ``"(単位：百万円)"``; empty string when absent."""
    for char in _PARENTHESES:
        text = text.replace(char, "")
    parts = text.split(_UNIT_SEPARATOR)
    if len(parts) >= 2:
        return parts[1].strip()
    return ""


def _build_row(segments: List[str]) -> Optional[LineItemRow]:
    label = segments[0]
    try:
        previous = parse_amount(segments[1])
        current = parse_amount(segments[2])
    except AmountParseError:
        return None
    return LineItemRow(label=label, previous=previous, current=current)
