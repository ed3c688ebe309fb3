"""
Locate statement text blocks inside an EDINET XBRL instance.

Each statement type can be filed under several mutually exclusive text-block
elements (consolidated vs. solo, J-GAAP vs. IFRS). Variants are tried in the
order listed here and the first non-empty block wins.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern

from .data_models import StatementFragment, StatementType


logger = logging.getLogger(__name__)

CONTEXT_REF = "CurrentYearDuration"


@dataclass(frozen=True)
class TagVariant:
    """One text-block element that may carry a statement."""

    name: str
    tag: str


def _compile_variant(tag: str) -> Pattern[str]:
    escaped = re.escape(tag)
    return re.compile(
        rf'<{escaped} contextRef="{CONTEXT_REF}">(.*?)</{escaped}>',
        re.DOTALL,
    )


STATEMENT_VARIANTS: Dict[StatementType, List[TagVariant]] = {
    StatementType.BALANCE_SHEET: [
        TagVariant("consolidated", "jpcrp_cor:ConsolidatedBalanceSheetTextBlock"),
        TagVariant("solo", "jpcrp_cor:BalanceSheetTextBlock"),
    ],
    StatementType.INCOME_STATEMENT: [
        TagVariant("consolidated", "jpcrp_cor:ConsolidatedStatementOfIncomeTextBlock"),
        TagVariant("solo", "jpcrp_cor:StatementOfIncomeTextBlock"),
    ],
    StatementType.CASH_FLOWS: [
        TagVariant("consolidated", "jpcrp_cor:ConsolidatedStatementOfCashFlowsTextBlock"),
        TagVariant(
            "consolidated_ifrs",
            "jpigp_cor:ConsolidatedStatementOfCashFlowsIFRSTextBlock",
        ),
        TagVariant("solo", "jpcrp_cor:StatementOfCashFlowsTextBlock"),
        TagVariant("solo_ifrs", "jpcrp_cor:StatementOfCashFlowsIFRSTextBlock"),
    ],
}

_PATTERNS: Dict[str, Pattern[str]] = {
    variant.tag: _compile_variant(variant.tag)
    for variants in STATEMENT_VARIANTS.values()
    for variant in variants
}


def locate(raw_text: str, statement_type: StatementType) -> Optional[StatementFragment]:
    """
    Return the text block for ``statement_type`` or ``None`` when absent.

    Args:
        raw_text: Decoded XBRL instance document
        statement_type: Statement to look for

    Returns:
        Fragment holding the block contents and the matched variant name
    """
    for variant in STATEMENT_VARIANTS[statement_type]:
        match = _PATTERNS[variant.tag].search(raw_text)
        if match and match.group(1):
            logger.debug(
                "Located %s using %s variant", statement_type.display_name, variant.name
            )
            return StatementFragment(
                statement_type=statement_type,
                variant=variant.name,
                text=match.group(1),
            )

    return None
