"""
Build typed statement summaries from extracted rows.
"""

import logging
from typing import Dict, Iterable, Optional, Type

from .data_models import (
    BalanceSheetSummary,
    CashFlowSummary,
    FundamentalsRecord,
    IncomeStatementSummary,
    LineItemRow,
    StatementType,
)
from .line_item_classifier import LineItemClassifier


logger = logging.getLogger(__name__)

SUMMARY_TYPES: Dict[StatementType, Type] = {
    StatementType.BALANCE_SHEET: BalanceSheetSummary,
    StatementType.INCOME_STATEMENT: IncomeStatementSummary,
    StatementType.CASH_FLOWS: CashFlowSummary,
}

# Statements whose rows also feed the fundamentals record
FUNDAMENTALS_SOURCES = (StatementType.BALANCE_SHEET, StatementType.INCOME_STATEMENT)


def new_fundamentals(company_name: str, period_start: str, period_end: str) -> FundamentalsRecord:
    return FundamentalsRecord(
        company_name=company_name,
        period_start=period_start,
        period_end=period_end,
    )


def build_summary(
    statement_type: StatementType,
    rows: Iterable[LineItemRow],
    unit_string: str,
    company_name: str,
    period_start: str,
    period_end: str,
    fundamentals: Optional[FundamentalsRecord] = None,
):
    """
    Accumulate ``rows`` into a new summary of ``statement_type``.

    Args:
        statement_type: Statement the rows were extracted from
        rows: Line items in document order
        unit_string: Unit declared by the fragment (e.g. "百万円")
        company_name: Filer name
        period_start: Fiscal period start (YYYY-MM-DD)
        period_end: Fiscal period end (YYYY-MM-DD)
        fundamentals: Record updated in place by BS and PL rows

    Returns:
        Populated summary instance
    """
    summary = SUMMARY_TYPES[statement_type](
        company_name=company_name,
        period_start=period_start,
        period_end=period_end,
        unit_string=unit_string,
    )

    if statement_type not in FUNDAMENTALS_SOURCES:
        fundamentals = None

    classifier = LineItemClassifier(statement_type, summary, fundamentals)
    matched = 0
    for row in rows:
        if classifier.classify(row):
            matched += 1

    logger.debug(
        "Classified %d rows into %s for %s", matched, statement_type.display_name, company_name
    )
    return summary
