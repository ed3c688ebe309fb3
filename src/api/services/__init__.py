"""Service layer package for the artifact retrieval API."""

from .exceptions import DataRetrievalError
from .report_service import ArtifactRetrievalService

__all__ = [
    "DataRetrievalError",
    "ArtifactRetrievalService",
]
