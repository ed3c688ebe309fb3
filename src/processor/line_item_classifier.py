"""
Map statement row labels onto summary fields.

Filers decorate canonical line-item names with prefixes and suffixes, so most
rules match by containment. Balance-sheet totals match exactly because the
canonical names nest inside each other ("負債合計" inside "流動負債合計",
"純資産合計" inside "負債純資産合計").
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set

from .data_models import FundamentalsRecord, LineItemRow, PeriodValues, StatementType


class MatchKind(Enum):
    EXACT = "exact"
    CONTAINS = "contains"


@dataclass(frozen=True)
class LabelRule:
    """
    One label-to-field mapping.

    Attributes:
        term: Label text (or label fragment) to match
        match: Exact or containment matching
        summary_field: Two-period summary field written by the rule
        fundamentals_field: Fundamentals field receiving the current period
        fill_if_zero: Only fill periods that are still zero
        flag_field: Boolean presence flag set on summary and fundamentals
        closing_label: Exact label that, once seen, stops further writes
    """

    term: str
    match: MatchKind
    summary_field: Optional[str] = None
    fundamentals_field: Optional[str] = None
    fill_if_zero: bool = False
    flag_field: Optional[str] = None
    closing_label: Optional[str] = None

    def matches(self, label: str) -> bool:
        if self.match is MatchKind.EXACT:
            return label == self.term
        return self.term in label


EXACT = MatchKind.EXACT
CONTAINS = MatchKind.CONTAINS

CLASSIFICATION_RULES: Dict[StatementType, List[LabelRule]] = {
    StatementType.BALANCE_SHEET: [
        LabelRule("流動資産合計", EXACT, "current_assets"),
        LabelRule("有形固定資産合計", EXACT, "tangible_assets"),
        LabelRule("無形固定資産合計", EXACT, "intangible_assets"),
        LabelRule("投資その他の資産合計", EXACT, "investments_and_other_assets"),
        LabelRule("流動負債合計", EXACT, "current_liabilities"),
        LabelRule("固定負債合計", EXACT, "fixed_liabilities"),
        LabelRule("純資産合計", EXACT, "net_assets", fundamentals_field="net_assets"),
        LabelRule("負債合計", EXACT, fundamentals_field="liabilities"),
    ],
    StatementType.INCOME_STATEMENT: [
        LabelRule("売上原価", CONTAINS, "cost_of_goods_sold"),
        LabelRule("販売費及び一般管理費", CONTAINS, "sga"),
        LabelRule("売上高", CONTAINS, "sales", fundamentals_field="sales"),
        LabelRule(
            "営業利益", CONTAINS, "operating_profit", fundamentals_field="operating_profit"
        ),
        # Loss-only filers: fills operating profit without overriding a profit row
        LabelRule(
            "営業損失（△）",
            EXACT,
            "operating_profit",
            fundamentals_field="operating_profit",
            fill_if_zero=True,
        ),
        LabelRule(
            "営業収益",
            CONTAINS,
            "operating_revenue",
            fundamentals_field="operating_revenue",
            flag_field="has_operating_revenue",
            closing_label="営業収益合計",
        ),
        LabelRule(
            "営業費用",
            CONTAINS,
            "operating_cost",
            fundamentals_field="operating_cost",
            flag_field="has_operating_cost",
            closing_label="営業費用合計",
        ),
    ],
    StatementType.CASH_FLOWS: [
        LabelRule("営業活動による", CONTAINS, "operating_cf"),
        LabelRule("投資活動による", CONTAINS, "investing_cf"),
        LabelRule("財務活動による", CONTAINS, "financing_cf"),
        LabelRule("期首残高", CONTAINS, "start_cash"),
        LabelRule("期末残高", CONTAINS, "end_cash"),
    ],
}


class LineItemClassifier:
    """Apply the rule table of one statement type to rows of one fragment.

    Every matching rule fires, so a single row may feed several fields. The
    classifier holds the per-fragment latch state for rules with a
    ``closing_label``; create one instance per fragment.
    """

    def __init__(
        self,
        statement_type: StatementType,
        summary,
        fundamentals: Optional[FundamentalsRecord] = None,
    ):
        self.statement_type = statement_type
        self.summary = summary
        self.fundamentals = fundamentals
        self.rules = CLASSIFICATION_RULES[statement_type]
        self._closed: Set[str] = set()

    def classify(self, row: LineItemRow) -> List[str]:
        """
        Update summary and fundamentals from ``row``.

        Returns:
            Names of the summary/fundamentals fields written by the row
        """
        written: List[str] = []
        for rule in self.rules:
            if not rule.matches(row.label):
                continue
            if rule.closing_label and rule.term in self._closed:
                continue
            written.extend(self._apply(rule, row))
            if rule.closing_label and row.label == rule.closing_label:
                self._closed.add(rule.term)
        return written

    def is_closed(self, term: str) -> bool:
        return term in self._closed

    def _apply(self, rule: LabelRule, row: LineItemRow) -> List[str]:
        written: List[str] = []

        if rule.summary_field:
            target: PeriodValues = getattr(self.summary, rule.summary_field)
            if rule.fill_if_zero:
                if target.previous == 0:
                    target.previous = row.previous
                if target.current == 0:
                    target.current = row.current
            else:
                target.previous = row.previous
                target.current = row.current
            written.append(rule.summary_field)

        if rule.flag_field:
            setattr(self.summary, rule.flag_field, True)

        if self.fundamentals is not None:
            if rule.flag_field:
                setattr(self.fundamentals, rule.flag_field, True)
            if rule.fundamentals_field:
                field_name = rule.fundamentals_field
                if not rule.fill_if_zero or getattr(self.fundamentals, field_name) == 0:
                    setattr(self.fundamentals, field_name, row.current)
                    written.append(f"fundamentals.{field_name}")

        return written
