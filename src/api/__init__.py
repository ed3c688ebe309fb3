"""API package exposing read access to published EDINET artifacts."""

from .app import app, create_app
from .data_models import ReportRecord
from .services import ArtifactRetrievalService, DataRetrievalError

__all__ = [
    "app",
    "create_app",
    "ReportRecord",
    "ArtifactRetrievalService",
    "DataRetrievalError",
]
