"""
Filing-level orchestration: locate, extract, classify, validate and publish
every statement of a filing.
"""

import json
import logging
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, Iterable, List, Optional

from tqdm import tqdm

from .artifact_publisher import ArtifactPublisher, artifact_key, fundamentals_key
from .config import PipelineConfig
from .data_models import (
    Filing,
    FilingResult,
    FundamentalsRecord,
    PublishOutcome,
    StatementResult,
    StatementStatus,
    StatementType,
)
from .exceptions import FilingPayloadError, ObjectStoreError
from .object_store import ObjectStore
from .row_extractor import clean_fragment_html, extract_rows
from .statement_locator import locate
from .summary_builder import build_summary, new_fundamentals
from .validator import validate, validate_fundamentals


logger = logging.getLogger(__name__)

# Statements are processed in this order; BS and PL feed the fundamentals record
PROCESSING_ORDER = (
    StatementType.BALANCE_SHEET,
    StatementType.INCOME_STATEMENT,
    StatementType.CASH_FLOWS,
)


class FilingProcessor:
    """
    Process EDINET filings into published statement artifacts.
    """

    def __init__(
        self,
        store: ObjectStore,
        config: Optional[PipelineConfig] = None,
        publisher: Optional[ArtifactPublisher] = None,
    ):
        """
        Initialize processor.

        Args:
            store: Object store receiving the artifacts
            config: Pipeline configuration (defaults when None)
            publisher: Publisher to use instead of one built from ``config``
        """
        self.config = config or PipelineConfig()
        self.store = store
        self.publisher = publisher or ArtifactPublisher(
            store, retry_attempts=self.config.publish_retry_attempts
        )

    def process_filing(self, filing: Filing) -> FilingResult:
        """
        Process one filing end to end.

        A failure inside one statement is recorded on its StatementResult and
        the remaining statements still run. Payload or XML failures abandon
        the filing. The payload is always cleaned up.

        Args:
            filing: Filing to process

        Returns:
            FilingResult describing every statement outcome
        """
        logger.info(f"Processing filing: {filing.display_name}")
        result = FilingResult(
            filer_code=filing.filer_code,
            doc_id=filing.doc_id,
            company_name=filing.filer_name,
            success=False,
        )

        try:
            raw_text = self._read_instance(filing)
            fundamentals = new_fundamentals(
                filing.filer_name, filing.period_start, filing.period_end
            )

            for statement_type in PROCESSING_ORDER:
                statement_result = self._process_statement(
                    filing, raw_text, statement_type, fundamentals
                )
                result.statements.append(statement_result)
                if statement_result.status is StatementStatus.FAILED:
                    result.warnings.append(
                        f"{statement_type.value}: {statement_result.error}"
                    )

            result.fundamentals = fundamentals
            self._publish_fundamentals(filing, fundamentals, result)
            result.success = True

        except FilingPayloadError as e:
            logger.error(f"Failed to read filing {filing.display_name}: {e}")
            result.error = str(e)

        finally:
            try:
                filing.payload.cleanup()
            except OSError as e:
                logger.warning(f"Cleanup failed for {filing.display_name}: {e}")

        return result

    def process_filings(
        self,
        filings: Iterable[Filing],
        show_progress: bool = True,
    ) -> List[FilingResult]:
        """
        Process filings concurrently, one task per filing.

        Args:
            filings: Filings to process
            show_progress: Whether to show progress bar

        Returns:
            List of FilingResult objects in completion order
        """
        filings = list(filings)
        logger.info(f"Starting batch processing of {len(filings)} filings")

        results: List[FilingResult] = []
        progress_bar = None

        if show_progress:
            progress_bar = tqdm(total=len(filings), desc="Processing filings", unit="filing")

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            future_to_filing = {
                executor.submit(self.process_filing, filing): filing for filing in filings
            }

            for future in as_completed(future_to_filing):
                filing = future_to_filing[future]
                try:
                    result = future.result()
                except Exception as e:
                    logger.error(f"Unexpected error processing {filing.display_name}: {e}")
                    result = FilingResult(
                        filer_code=filing.filer_code,
                        doc_id=filing.doc_id,
                        company_name=filing.filer_name,
                        success=False,
                        error=f"Unexpected error: {e}",
                    )
                results.append(result)

                if progress_bar:
                    status = "✓" if result.success else "✗"
                    progress_bar.set_postfix_str(f"{status} {filing.display_name}")
                    progress_bar.update(1)

        if progress_bar:
            progress_bar.close()

        successful = sum(1 for r in results if r.success)
        logger.info(
            f"Processing completed: {successful} successful, {len(results) - successful} failed"
        )
        return results

    def _read_instance(self, filing: Filing) -> str:
        try:
            raw = filing.payload.read_bytes()
        except FilingPayloadError:
            raise
        except Exception as e:
            raise FilingPayloadError(f"Failed to fetch payload: {e}") from e

        try:
            ET.fromstring(raw)
        except ET.ParseError as e:
            raise FilingPayloadError(f"Malformed XBRL document: {e}") from e

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FilingPayloadError(f"XBRL document is not UTF-8: {e}") from e

    def _process_statement(
        self,
        filing: Filing,
        raw_text: str,
        statement_type: StatementType,
        fundamentals: FundamentalsRecord,
    ) -> StatementResult:
        label = f"{statement_type.display_name} of {filing.display_name}"

        fragment = locate(raw_text, statement_type)
        if fragment is None:
            logger.info(f"Not found: {label}")
            return StatementResult(statement_type=statement_type, status=StatementStatus.NOT_FOUND)

        result = StatementResult(
            statement_type=statement_type,
            status=StatementStatus.FAILED,
            variant=fragment.variant,
        )

        try:
            html_text = clean_fragment_html(fragment.text)
            rows, unit_string = extract_rows(html_text)
            result.rows = rows
            result.unit_string = unit_string

            summary = build_summary(
                statement_type,
                rows,
                unit_string,
                filing.filer_name,
                filing.period_start,
                filing.period_end,
                fundamentals,
            )
            result.summary = summary

            result.published["html"] = self.publisher.publish_html(
                artifact_key(filing, statement_type, "html"), html_text
            )

            if validate(summary):
                result.published["json"] = self.publisher.publish_json(
                    artifact_key(filing, statement_type, "json"), summary.to_dict()
                )
                result.status = StatementStatus.VALID
            else:
                result.status = StatementStatus.INVALID
                logger.info(f"Invalid, not published: {label}")
                logger.debug(
                    "Rejected %s summary: %s",
                    statement_type.value,
                    json.dumps(summary.to_dict(), ensure_ascii=False),
                )

        except Exception as e:
            logger.error(f"Failed to process {label}: {e}")
            result.status = StatementStatus.FAILED
            result.error = str(e)

        return result

    def _publish_fundamentals(
        self, filing: Filing, fundamentals: FundamentalsRecord, result: FilingResult
    ) -> None:
        if not validate_fundamentals(fundamentals):
            logger.info(f"Invalid, not published: Fundamentals of {filing.display_name}")
            logger.debug(
                "Rejected fundamentals: %s",
                json.dumps(fundamentals.to_dict(), ensure_ascii=False),
            )
            return

        try:
            result.fundamentals_outcome = self.publisher.publish_json(
                fundamentals_key(filing), fundamentals.to_dict()
            )
        except ObjectStoreError as e:
            logger.error(f"Failed to publish fundamentals of {filing.display_name}: {e}")
            result.warnings.append(f"Fundamentals: {e}")


def get_run_summary(results: List[FilingResult]) -> Dict[str, Any]:
    """
    Generate run summary statistics.

    Args:
        results: List of filing results

    Returns:
        Dictionary with summary statistics
    """
    total = len(results)
    successful = sum(1 for r in results if r.success)

    statement_counts: Dict[str, Dict[str, int]] = {
        statement_type.value: {status.value: 0 for status in StatementStatus}
        for statement_type in PROCESSING_ORDER
    }
    publish_counts = {outcome.value: 0 for outcome in PublishOutcome}

    for result in results:
        for statement in result.statements:
            statement_counts[statement.statement_type.value][statement.status.value] += 1
            for outcome in statement.published.values():
                publish_counts[outcome.value] += 1
        if result.fundamentals_outcome is not None:
            publish_counts[result.fundamentals_outcome.value] += 1

    return {
        "total_filings": total,
        "successful": successful,
        "failed": total - successful,
        "success_rate": (successful / total * 100) if total > 0 else 0,
        "statements": statement_counts,
        "artifacts": publish_counts,
        "errors": [
            f"{r.filer_code}/{r.doc_id}: {r.error}" for r in results if not r.success and r.error
        ],
    }
