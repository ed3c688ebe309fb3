"""Data models shared across the artifact retrieval API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(slots=True)
class ReportRecord:
    """A published statement artifact and its raw contents."""

    file_name: str
    data: str

    def to_dict(self) -> Dict[str, object]:
        """Serialize the record into a JSON-serializable dictionary."""

        return {
            "file_name": self.file_name,
            "data": self.data,
        }
