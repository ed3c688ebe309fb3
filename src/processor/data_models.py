"""
Data models for EDINET statement processing.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .input_handler import FilingPayload


class StatementType(Enum):
    """Financial statement types extracted from a filing."""

    BALANCE_SHEET = "BS"
    INCOME_STATEMENT = "PL"
    CASH_FLOWS = "CF"

    @property
    def display_name(self) -> str:
        return _STATEMENT_DISPLAY_NAMES[self]


_STATEMENT_DISPLAY_NAMES = {
    StatementType.BALANCE_SHEET: "Balance Sheet",
    StatementType.INCOME_STATEMENT: "Income Statement",
    StatementType.CASH_FLOWS: "Cash Flows",
}


class StatementStatus(Enum):
    """Terminal state of one statement branch."""

    VALID = "valid"
    INVALID = "invalid"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class PublishOutcome(Enum):
    """Result of an idempotent artifact write."""

    PUBLISHED = "published"
    SKIPPED_EXISTING = "skipped_existing"


@dataclass
class PeriodValues:
    """Previous-period and current-period values of one line item."""

    previous: int = 0
    current: int = 0

    def has_value(self) -> bool:
        """True when at least one of the two periods is non-zero."""
        return self.previous != 0 or self.current != 0


@dataclass
class LineItemRow:
    """A parsed statement row: label plus two period amounts."""

    label: str
    previous: int
    current: int


@dataclass
class StatementFragment:
    """Located text block for one statement type and tag variant."""

    statement_type: StatementType
    variant: str
    text: str


@dataclass
class _SummaryBase:
    company_name: str = ""
    period_start: str = ""
    period_end: str = ""
    unit_string: str = ""

    def has_identity(self) -> bool:
        return bool(self.company_name and self.period_start and self.period_end)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the summary into a JSON-friendly dictionary."""
        return asdict(self)


@dataclass
class BalanceSheetSummary(_SummaryBase):
    """Balance sheet totals for two periods."""

    current_assets: PeriodValues = field(default_factory=PeriodValues)
    tangible_assets: PeriodValues = field(default_factory=PeriodValues)
    intangible_assets: PeriodValues = field(default_factory=PeriodValues)
    investments_and_other_assets: PeriodValues = field(default_factory=PeriodValues)
    current_liabilities: PeriodValues = field(default_factory=PeriodValues)
    fixed_liabilities: PeriodValues = field(default_factory=PeriodValues)
    net_assets: PeriodValues = field(default_factory=PeriodValues)


@dataclass
class IncomeStatementSummary(_SummaryBase):
    """Income statement lines for two periods.

    Filers reporting operating revenue/cost instead of sales/cost of goods
    sold populate the ``operating_*`` fields and the ``has_*`` flags.
    """

    cost_of_goods_sold: PeriodValues = field(default_factory=PeriodValues)
    sga: PeriodValues = field(default_factory=PeriodValues)
    sales: PeriodValues = field(default_factory=PeriodValues)
    operating_profit: PeriodValues = field(default_factory=PeriodValues)
    has_operating_revenue: bool = False
    operating_revenue: PeriodValues = field(default_factory=PeriodValues)
    has_operating_cost: bool = False
    operating_cost: PeriodValues = field(default_factory=PeriodValues)


@dataclass
class CashFlowSummary(_SummaryBase):
    """Cash-flow statement lines for two periods."""

    operating_cf: PeriodValues = field(default_factory=PeriodValues)
    investing_cf: PeriodValues = field(default_factory=PeriodValues)
    financing_cf: PeriodValues = field(default_factory=PeriodValues)
    start_cash: PeriodValues = field(default_factory=PeriodValues)
    end_cash: PeriodValues = field(default_factory=PeriodValues)


@dataclass
class FundamentalsRecord:
    """Current-period figures gathered across BS and PL for ratio analysis."""

    company_name: str = ""
    period_start: str = ""
    period_end: str = ""
    sales: int = 0
    operating_revenue: int = 0
    has_operating_revenue: bool = False
    operating_cost: int = 0
    has_operating_cost: bool = False
    operating_profit: int = 0
    liabilities: int = 0
    net_assets: int = 0

    def has_identity(self) -> bool:
        return bool(self.company_name and self.period_start and self.period_end)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "FundamentalsRecord":
        known = {name: payload[name] for name in cls.__dataclass_fields__ if name in payload}
        return cls(**known)


@dataclass
class Filing:
    """One securities report queued for extraction."""

    filer_code: str
    filer_name: str
    doc_id: str
    period_start: str
    period_end: str
    payload: "FilingPayload"

    @property
    def display_name(self) -> str:
        return f"{self.filer_name} ({self.filer_code}, {self.doc_id})"


@dataclass
class StatementResult:
    """Outcome of processing one statement type of one filing."""

    statement_type: StatementType
    status: StatementStatus
    variant: Optional[str] = None
    unit_string: str = ""
    rows: List[LineItemRow] = field(default_factory=list)
    summary: Optional[_SummaryBase] = None
    published: Dict[str, PublishOutcome] = field(default_factory=dict)  # extension -> outcome
    error: Optional[str] = None


@dataclass
class FilingResult:
    """Result of processing a filing."""

    filer_code: str
    doc_id: str
    company_name: str
    success: bool
    statements: List[StatementResult] = field(default_factory=list)
    fundamentals: Optional[FundamentalsRecord] = None
    fundamentals_outcome: Optional[PublishOutcome] = None
    error: Optional[str] = None
    warnings: Optional[List[str]] = None

    def __post_init__(self):
        if self.warnings is None:
            self.warnings = []

    def get_statement(self, statement_type: StatementType) -> Optional[StatementResult]:
        for result in self.statements:
            if result.statement_type == statement_type:
                return result
        return None
