"""
Completeness checks applied before a summary is published.

A two-period field counts as present when either period is non-zero.
"""

from .data_models import (
    BalanceSheetSummary,
    CashFlowSummary,
    FundamentalsRecord,
    IncomeStatementSummary,
)


BALANCE_SHEET_FIELDS = (
    "current_assets",
    "tangible_assets",
    "intangible_assets",
    "investments_and_other_assets",
    "current_liabilities",
    "fixed_liabilities",
    "net_assets",
)

INCOME_STATEMENT_FIELDS = (
    "cost_of_goods_sold",
    "sga",
    "sales",
    "operating_profit",
)

CASH_FLOW_FIELDS = (
    "operating_cf",
    "investing_cf",
    "financing_cf",
    "start_cash",
    "end_cash",
)


def _all_present(summary, field_names) -> bool:
    return all(getattr(summary, name).has_value() for name in field_names)


def validate_balance_sheet(summary: BalanceSheetSummary) -> bool:
    return summary.has_identity() and _all_present(summary, BALANCE_SHEET_FIELDS)


def validate_income_statement(summary: IncomeStatementSummary) -> bool:
    """Operating revenue/cost filers and sales-based filers are checked differently."""
    if summary.has_operating_revenue and summary.has_operating_cost:
        if summary.operating_revenue.has_value() and summary.operating_cost.has_value():
            return True
    return summary.has_identity() and _all_present(summary, INCOME_STATEMENT_FIELDS)


def validate_cash_flow(summary: CashFlowSummary) -> bool:
    return summary.has_identity() and _all_present(summary, CASH_FLOW_FIELDS)


def validate_fundamentals(record: FundamentalsRecord) -> bool:
    if not record.has_identity():
        return False

    common = (
        record.operating_profit != 0
        and record.liabilities != 0
        and record.net_assets != 0
    )
    if record.has_operating_revenue and record.has_operating_cost:
        if common and record.operating_revenue != 0 and record.operating_cost != 0:
            return True
    return common and record.sales != 0


_VALIDATORS = {
    BalanceSheetSummary: validate_balance_sheet,
    IncomeStatementSummary: validate_income_statement,
    CashFlowSummary: validate_cash_flow,
    FundamentalsRecord: validate_fundamentals,
}


def validate(summary) -> bool:
    """Dispatch to the validator matching the summary's type."""
    try:
        validator = _VALIDATORS[type(summary)]
    except KeyError:
        raise TypeError(f"No validator for {type(summary).__name__}") from None
    return validator(summary)
