"""Stored run lookup endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.api.models.errors import ErrorCodes, ErrorResponse
from app.api.models.responses import AuditResultResponse
from app.api.v1.deps import api_error, get_run_store
from geo_audit.audit.run_store import RunStore, is_valid_run_id

router = APIRouter(tags=["Runs"])


@router.get(
    "/runs/{run_id}",
    response_model=AuditResultResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid run id"},
        404: {"model": ErrorResponse, "description": "Run not found"},
    },
    summary="Get a stored audit result",
)
def get_run(run_id: str, store: RunStore = Depends(get_run_store)) -> dict:
    """Return the stored document for a run id."""
    if not is_valid_run_id(run_id):
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            ErrorCodes.INVALID_REQUEST,
            "Invalid run ID format. Expected 32 hex characters.",
            run_id=run_id,
        )
    document = store.get(run_id)
    if document is None:
        raise api_error(
            status.HTTP_404_NOT_FOUND,
            ErrorCodes.RUN_NOT_FOUND,
            f"Run not found: {run_id}",
            run_id=run_id,
        )
    return document
