"""Clearance endpoints - read-only no-dues status for the logged-in student.

GET /api/clearance/status - JWT required; optional term query (defaults to the most recent ledger).
"""
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from typing import Optional

from database import DocumentStore
from middleware import get_student_identity, get_document_store
from models import StudentStatusView
from services.clearance_service import ClearanceService

router = APIRouter(prefix="/api/clearance", tags=["clearance"])

ERROR_STATUS_CODES = {
    "NO_IDENTITY": status.HTTP_401_UNAUTHORIZED,
    "SHARD_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NO_LEDGER_FOR_TERM": status.HTTP_404_NOT_FOUND,
    "NO_MATCHING_ENTRY": status.HTTP_404_NOT_FOUND,
    "STORE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "RESOLUTION_TIMEOUT": status.HTTP_504_GATEWAY_TIMEOUT,
    "MALFORMED_LEDGER": status.HTTP_502_BAD_GATEWAY,
}


def error_response(error_code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=ERROR_STATUS_CODES.get(error_code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content={"detail": message, "error_code": error_code},
    )


@router.get("/status", response_model=StudentStatusView)
async def get_clearance_status(
    term: Optional[str] = Query(None, description="Ledger term id, e.g. sem2 (defaults to the latest ledger)"),
    identity: Optional[str] = Depends(get_student_identity),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Clearance view for the authenticated student. No side effects.
    Exactly one classified error is returned when resolution fails.
    """
    result = await ClearanceService(store).resolve_student_status(identity, term)
    if not result.ok:
        return error_response(result.error.error_code, result.error.message)
    return result.view
