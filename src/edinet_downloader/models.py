"""
Data models for the EDINET document list API.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .utils import parse_period_from_description


SECURITIES_REPORT = ("030000", "120")
AMENDED_SECURITIES_REPORT = ("030001", "130")


@dataclass
class DocumentEntry:
    """One entry of the EDINET ``documents.json`` result list."""
    doc_id: str
    edinet_code: Optional[str] = None
    filer_name: Optional[str] = None
    form_code: Optional[str] = None
    doc_type_code: Optional[str] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    doc_description: Optional[str] = None
    submit_date_time: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "DocumentEntry":
        return cls(
            doc_id=payload.get("docID") or "",
            edinet_code=payload.get("edinetCode"),
            filer_name=payload.get("filerName"),
            form_code=payload.get("formCode"),
            doc_type_code=payload.get("docTypeCode"),
            period_start=payload.get("periodStart"),
            period_end=payload.get("periodEnd"),
            doc_description=payload.get("docDescription"),
            submit_date_time=payload.get("submitDateTime"),
        )

    @property
    def is_securities_report(self) -> bool:
        """True for securities reports and amended securities reports."""
        codes = (self.form_code, self.doc_type_code)
        return codes in (SECURITIES_REPORT, AMENDED_SECURITIES_REPORT)

    @property
    def fiscal_period(self) -> tuple:
        """Period bounds, falling back to the description for missing ones."""
        fallback_start, fallback_end = parse_period_from_description(self.doc_description)
        return (self.period_start or fallback_start, self.period_end or fallback_end)

    @property
    def display_name(self) -> str:
        return f"{self.filer_name or 'unknown'} {self.doc_id}"
