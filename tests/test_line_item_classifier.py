"""Tests for label classification into summaries and fundamentals."""

from src.processor.data_models import (
    BalanceSheetSummary,
    CashFlowSummary,
    FundamentalsRecord,
    IncomeStatementSummary,
    LineItemRow,
    PeriodValues,
    StatementType,
)
from src.processor.line_item_classifier import LineItemClassifier


def _classify(statement_type, summary, rows, fundamentals=None):
    classifier = LineItemClassifier(statement_type, summary, fundamentals)
    for label, previous, current in rows:
        classifier.classify(LineItemRow(label, previous, current))
    return classifier


def test_balance_sheet_labels_match_exactly():
    summary = BalanceSheetSummary()
    fundamentals = FundamentalsRecord()

    _classify(
        StatementType.BALANCE_SHEET,
        summary,
        [
            ("流動負債合計", 600, 650),
            ("負債合計", 1000, 1030),
            ("純資産合計", 1420, 1750),
            ("負債純資産合計", 2420, 2780),
        ],
        fundamentals,
    )

    assert summary.current_liabilities == PeriodValues(600, 650)
    assert summary.net_assets == PeriodValues(1420, 1750)
    assert fundamentals.liabilities == 1030
    assert fundamentals.net_assets == 1750


def test_balance_sheet_ignores_decorated_labels():
    summary = BalanceSheetSummary()

    _classify(StatementType.BALANCE_SHEET, summary, [("流動資産合計（注）", 1, 2)])

    assert not summary.current_assets.has_value()


def test_income_statement_labels_match_by_containment():
    summary = IncomeStatementSummary()
    fundamentals = FundamentalsRecord()

    _classify(
        StatementType.INCOME_STATEMENT,
        summary,
        [
            ("売上高", 100, 200),
            ("売上原価合計", 60, 110),
            ("販売費及び一般管理費合計", 20, 30),
            ("営業利益", 20, 60),
        ],
        fundamentals,
    )

    assert summary.sales == PeriodValues(100, 200)
    assert summary.cost_of_goods_sold == PeriodValues(60, 110)
    assert summary.sga == PeriodValues(20, 30)
    assert summary.operating_profit == PeriodValues(20, 60)
    assert fundamentals.sales == 200
    assert fundamentals.operating_profit == 60


def test_operating_loss_fills_only_zero_periods():
    summary = IncomeStatementSummary()
    fundamentals = FundamentalsRecord()

    _classify(
        StatementType.INCOME_STATEMENT,
        summary,
        [("営業利益", 50, 0), ("営業損失（△）", -10, -40)],
        fundamentals,
    )

    assert summary.operating_profit == PeriodValues(50, -40)
    assert fundamentals.operating_profit == -40


def test_operating_loss_does_not_override_profit():
    summary = IncomeStatementSummary()
    fundamentals = FundamentalsRecord()

    _classify(
        StatementType.INCOME_STATEMENT,
        summary,
        [("営業利益", 50, 70), ("営業損失（△）", -10, -40)],
        fundamentals,
    )

    assert summary.operating_profit == PeriodValues(50, 70)
    assert fundamentals.operating_profit == 70


def test_operating_revenue_latch_closes_on_total():
    summary = IncomeStatementSummary()
    fundamentals = FundamentalsRecord()

    classifier = _classify(
        StatementType.INCOME_STATEMENT,
        summary,
        [
            ("営業収益", 10, 20),
            ("営業収益合計", 100, 200),
            ("営業収益", 50, 60),
            ("その他の営業収益", 1, 2),
            ("営業費用合計", 80, 150),
            ("営業費用合計", 1, 1),
        ],
        fundamentals,
    )

    assert summary.has_operating_revenue and fundamentals.has_operating_revenue
    assert summary.operating_revenue == PeriodValues(100, 200)
    assert fundamentals.operating_revenue == 200
    assert summary.operating_cost == PeriodValues(80, 150)
    assert fundamentals.operating_cost == 150
    assert classifier.is_closed("営業収益")
    assert classifier.is_closed("営業費用")


def test_latch_is_per_classifier():
    first = IncomeStatementSummary()
    _classify(StatementType.INCOME_STATEMENT, first, [("営業収益合計", 1, 2)])

    second = IncomeStatementSummary()
    _classify(StatementType.INCOME_STATEMENT, second, [("営業収益合計", 3, 4)])

    assert second.operating_revenue == PeriodValues(3, 4)


def test_cash_flow_rules():
    summary = CashFlowSummary()

    _classify(
        StatementType.CASH_FLOWS,
        summary,
        [
            ("営業活動によるキャッシュ・フロー", 900, 1100),
            ("投資活動によるキャッシュ・フロー", -400, -350),
            ("財務活動によるキャッシュ・フロー", -200, -150),
            ("現金及び現金同等物の期首残高", 1000, 1300),
            ("現金及び現金同等物の期末残高", 1300, 1900),
        ],
    )

    assert summary.operating_cf == PeriodValues(900, 1100)
    assert summary.investing_cf == PeriodValues(-400, -350)
    assert summary.financing_cf == PeriodValues(-200, -150)
    assert summary.start_cash == PeriodValues(1000, 1300)
    assert summary.end_cash == PeriodValues(1300, 1900)


def test_classify_reports_written_fields():
    classifier = LineItemClassifier(
        StatementType.BALANCE_SHEET, BalanceSheetSummary(), FundamentalsRecord()
    )

    assert classifier.classify(LineItemRow("純資産合計", 1, 2)) == [
        "net_assets",
        "fundamentals.net_assets",
    ]
    assert classifier.classify(LineItemRow("その他", 1, 2)) == []
