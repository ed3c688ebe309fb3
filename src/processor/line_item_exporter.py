"""Flatten parsed statement rows into a long line-item table."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

import pandas as pd

from .data_models import FilingResult


logger = logging.getLogger(__name__)

LINE_ITEM_COLUMNS = [
    "filer_code",
    "doc_id",
    "company_name",
    "statement_type",
    "variant",
    "status",
    "unit",
    "line_order",
    "label",
    "previous",
    "current",
]


def build_line_items_dataframe(results: Sequence[FilingResult]) -> pd.DataFrame:
    """One record per extracted row, across all statements of all filings."""

    records: list[dict] = []
    for result in results:
        for statement in result.statements:
            for line_order, row in enumerate(statement.rows, start=1):
                records.append(
                    {
                        "filer_code": result.filer_code,
                        "doc_id": result.doc_id,
                        "company_name": result.company_name,
                        "statement_type": statement.statement_type.value,
                        "variant": statement.variant,
                        "status": statement.status.value,
                        "unit": statement.unit_string or None,
                        "line_order": line_order,
                        "label": row.label,
                        "previous": row.previous,
                        "current": row.current,
                    }
                )

    df = pd.DataFrame.from_records(records, columns=LINE_ITEM_COLUMNS)
    return df.astype({"line_order": "int64", "previous": "int64", "current": "int64"})


def export_line_items(
    df: pd.DataFrame,
    output_path: Path | str,
    *,
    parquet_kwargs: Optional[Mapping[str, Any]] = None,
) -> Path:
    """
    Write the line-item table as CSV or Parquet, chosen by file extension.

    Raises:
        ValueError: If the extension is neither ``.csv`` nor ``.parquet``
        RuntimeError: If no Parquet engine is installed
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        df.to_csv(path, index=False, encoding="utf-8")
    elif suffix == ".parquet":
        try:
            df.to_parquet(path, index=False, **dict(parquet_kwargs or {}))
        except ImportError as exc:  # pragma: no cover - dependent on optional engine
            raise RuntimeError(
                "pyarrow or fastparquet is required to write line items as parquet"
            ) from exc
    else:
        raise ValueError(f"Unsupported line-item export format: {path.suffix}")

    logger.info("Wrote %d line items to %s", len(df), path)
    return path
