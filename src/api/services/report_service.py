"""Service reading published statement and fundamentals artifacts."""

from __future__ import annotations

import json
import logging
from typing import List

from ...processor.artifact_publisher import FUNDAMENTALS_FOLDER
from ...processor.data_models import FundamentalsRecord, StatementType
from ...processor.exceptions import ObjectNotFoundError, ObjectStoreError
from ...processor.object_store import ObjectStore
from ..data_models import ReportRecord
from .exceptions import DataRetrievalError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("json", "html")


class ArtifactRetrievalService:
    """Lists and reads artifacts through the object store port."""

    def __init__(self, store: ObjectStore) -> None:
        self.store = store

    def get_reports(
        self,
        filer_code: str,
        statement_type: str,
        extension: str,
    ) -> List[ReportRecord]:
        """Return every ``statement_type`` artifact of a filer with ``extension``."""

        filer_code = _normalize_filer_code(filer_code)
        statement_code = _normalize_statement_type(statement_type)
        extension = (extension or "").lower().lstrip(".")
        if extension not in SUPPORTED_EXTENSIONS:
            raise DataRetrievalError(
                f"extension must be one of {', '.join(SUPPORTED_EXTENSIONS)}"
            )

        records: List[ReportRecord] = []
        for key in self._list(f"{filer_code}/"):
            parts = key.split("/")
            if len(parts) < 3 or parts[1] != statement_code:
                continue
            if not key.endswith(f".{extension}"):
                continue
            body = self._get(key)
            records.append(ReportRecord(file_name=key, data=body.decode("utf-8")))

        logger.debug(
            "Found %d %s %s artifacts for %s", len(records), statement_code, extension, filer_code
        )
        return records

    def get_fundamentals(self, filer_code: str) -> List[FundamentalsRecord]:
        """Return every fundamentals record published for a filer."""

        filer_code = _normalize_filer_code(filer_code)
        records: List[FundamentalsRecord] = []
        for key in self._list(f"{filer_code}/{FUNDAMENTALS_FOLDER}/"):
            try:
                payload = json.loads(self._get(key).decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as exc:
                raise DataRetrievalError(f"Corrupt fundamentals artifact {key}: {exc}") from exc
            records.append(FundamentalsRecord.from_dict(payload))
        return records

    def _list(self, prefix: str) -> List[str]:
        try:
            return self.store.list(prefix)
        except ObjectStoreError as exc:
            raise DataRetrievalError(f"Failed to list artifacts under {prefix}: {exc}") from exc

    def _get(self, key: str) -> bytes:
        try:
            return self.store.get(key)
        except ObjectNotFoundError as exc:
            raise DataRetrievalError(f"Artifact disappeared while reading: {key}") from exc
        except ObjectStoreError as exc:
            raise DataRetrievalError(f"Failed to read artifact {key}: {exc}") from exc


def _normalize_filer_code(value: str) -> str:
    cleaned = (value or "").strip().upper()
    if not cleaned or not cleaned.isalnum():
        raise DataRetrievalError(f"Invalid filerCode: {value!r}")
    return cleaned


def _normalize_statement_type(value: str) -> str:
    try:
        return StatementType((value or "").strip().upper()).value
    except ValueError:
        allowed = ", ".join(member.value for member in StatementType)
        raise DataRetrievalError(f"statementType must be one of {allowed}") from None
