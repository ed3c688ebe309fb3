"""
EDINET statement processor module.

Extracts balance sheet, income statement and cash-flow statement tables from
EDINET XBRL instances, validates their summaries and publishes them as JSON
and HTML artifacts.
"""

from .amount_parser import parse_amount
from .artifact_publisher import ArtifactPublisher, artifact_key, fundamentals_key
from .config import PipelineConfig
from .data_models import (
    BalanceSheetSummary,
    CashFlowSummary,
    Filing,
    FilingResult,
    FundamentalsRecord,
    IncomeStatementSummary,
    LineItemRow,
    PeriodValues,
    PublishOutcome,
    StatementFragment,
    StatementResult,
    StatementStatus,
    StatementType,
)
from .exceptions import (
    AmountParseError,
    ConfigurationError,
    ExtractionError,
    FilingPayloadError,
    ObjectNotFoundError,
    ObjectStoreError,
)
from .filing_processor import FilingProcessor, get_run_summary
from .input_handler import BytesPayload, FilingPayload, LocalFilePayload, ZipPayload, create_payload
from .line_item_classifier import LineItemClassifier
from .line_item_exporter import build_line_items_dataframe, export_line_items
from .object_store import InMemoryObjectStore, LocalObjectStore, ObjectStore
from .row_extractor import clean_fragment_html, extract_rows
from .statement_locator import locate
from .summary_builder import build_summary
from .validator import validate

__all__ = [
    "parse_amount",
    "ArtifactPublisher",
    "artifact_key",
    "fundamentals_key",
    "PipelineConfig",
    "BalanceSheetSummary",
    "CashFlowSummary",
    "Filing",
    "FilingResult",
    "FundamentalsRecord",
    "IncomeStatementSummary",
    "LineItemRow",
    "PeriodValues",
    "PublishOutcome",
    "StatementFragment",
    "StatementResult",
    "StatementStatus",
    "StatementType",
    "AmountParseError",
    "ConfigurationError",
    "ExtractionError",
    "FilingPayloadError",
    "ObjectNotFoundError",
    "ObjectStoreError",
    "FilingProcessor",
    "get_run_summary",
    "BytesPayload",
    "FilingPayload",
    "LocalFilePayload",
    "ZipPayload",
    "create_payload",
    "LineItemClassifier",
    "build_line_items_dataframe",
    "export_line_items",
    "InMemoryObjectStore",
    "LocalObjectStore",
    "ObjectStore",
    "clean_fragment_html",
    "extract_rows",
    "locate",
    "build_summary",
    "validate",
]
