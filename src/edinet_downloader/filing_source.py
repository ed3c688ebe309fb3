"""
Filing source backed by the EDINET API.
"""

import logging
import tempfile
import uuid
from pathlib import Path
from typing import List, Optional

from ..processor.data_models import Filing
from ..processor.input_handler import ZipPayload
from .edinet_client import EdinetClient
from .models import DocumentEntry
from .utils import iter_dates, parse_date


logger = logging.getLogger(__name__)


class EdinetDocumentPayload(ZipPayload):
    """ZIP payload downloaded from EDINET on first read."""

    def __init__(self, client: EdinetClient, doc_id: str, temp_dir: Optional[Path] = None):
        super().__init__(None, temp_dir)
        self.client = client
        self.doc_id = doc_id

    def validate(self) -> bool:
        if self.zip_path is None:
            return bool(self.doc_id)
        return super().validate()

    def read_bytes(self) -> bytes:
        if self.zip_path is None:
            target = self.temp_dir / f"{self.doc_id}_{uuid.uuid4().hex}.zip"
            self.zip_path = target
            self.client.download_document(self.doc_id, target)
        return super().read_bytes()

    def cleanup(self) -> None:
        """Remove the downloaded archive and extracted files."""
        super().cleanup()
        if self.zip_path is not None and self.zip_path.exists():
            self.zip_path.unlink()
        self.zip_path = None


class EdinetFilingSource:
    """
    Enumerate securities reports submitted in a date range.
    """

    def __init__(self, client: EdinetClient, temp_dir: Optional[Path] = None):
        self.client = client
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())

    def list_filings(self, start_date, end_date) -> List[Filing]:
        """
        List filings for every day from ``start_date`` to ``end_date``.

        Args:
            start_date: First submission date (date or YYYY-MM-DD)
            end_date: Last submission date, inclusive

        Returns:
            Filings with payloads that download lazily
        """
        filings: List[Filing] = []
        for day in iter_dates(parse_date(start_date), parse_date(end_date)):
            logger.info(f"Listing securities reports submitted on {day}")
            for entry in self.client.list_securities_reports(day):
                filing = self.to_filing(entry)
                if filing is not None:
                    filings.append(filing)

        logger.info(f"Found {len(filings)} securities reports")
        return filings

    def to_filing(self, entry: DocumentEntry) -> Optional[Filing]:
        if not entry.doc_id or not entry.edinet_code:
            logger.warning(f"Skipping document without id or filer code: {entry.display_name}")
            return None

        period_start, period_end = entry.fiscal_period
        return Filing(
            filer_code=entry.edinet_code,
            filer_name=entry.filer_name or "",
            doc_id=entry.doc_id,
            period_start=period_start,
            period_end=period_end,
            payload=EdinetDocumentPayload(self.client, entry.doc_id, self.temp_dir),
        )
