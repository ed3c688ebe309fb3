"""Application factory for the EDINET artifact retrieval API."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from ..processor.object_store import ObjectStore
from .data_router import router
from .services import ArtifactRetrievalService


def create_app(store: Optional[ObjectStore] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Without ``store`` the service reads from the configured local store
    directory on the first request.
    """

    app = FastAPI(
        title="EDINET Statement Artifacts API",
        version="0.1.0",
        description=(
            "Read-only access to published balance sheet, income statement, "
            "cash-flow and fundamentals artifacts."
        ),
    )
    if store is not None:
        app.state.report_service = ArtifactRetrievalService(store)
    app.include_router(router)
    return app


app = create_app()
