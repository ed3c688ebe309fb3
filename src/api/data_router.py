"""FastAPI router exposing the `/reports` and `/fundamentals` endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..processor.config import PipelineConfig
from ..processor.object_store import LocalObjectStore
from .services import ArtifactRetrievalService, DataRetrievalError


router = APIRouter(tags=["artifacts"])
logger = logging.getLogger(__name__)


def get_report_service(request: Request) -> ArtifactRetrievalService:
    """Return the app's retrieval service, building a local one on first use."""

    service = getattr(request.app.state, "report_service", None)
    if service is None:
        store = LocalObjectStore(PipelineConfig.from_env().store_dir)
        service = ArtifactRetrievalService(store)
        request.app.state.report_service = service
    return service


@router.get("/reports")
def list_reports(
    filer_code: str = Query(..., alias="filerCode"),
    statement_type: str = Query(..., alias="statementType"),
    extension: str = Query("json", alias="extension"),
    service: ArtifactRetrievalService = Depends(get_report_service),
):
    """Return statement artifacts of ``filerCode`` as ``[{file_name, data}]``."""

    logger.info(
        "Listing reports for filerCode=%s statementType=%s extension=%s",
        filer_code,
        statement_type,
        extension,
    )
    try:
        records = service.get_reports(filer_code, statement_type, extension)
    except DataRetrievalError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    logger.info("Returning %d reports for filerCode=%s", len(records), filer_code)
    return [record.to_dict() for record in records]


@router.get("/fundamentals")
def list_fundamentals(
    filer_code: str = Query(..., alias="filerCode"),
    service: ArtifactRetrievalService = Depends(get_report_service),
):
    """Return every fundamentals record published for ``filerCode``."""

    try:
        records = service.get_fundamentals(filer_code)
    except DataRetrievalError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    logger.info("Returning %d fundamentals for filerCode=%s", len(records), filer_code)
    return [record.to_dict() for record in records]
