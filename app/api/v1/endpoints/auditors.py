"""
Auditor management endpoints.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import AuditTrackerError, to_http_exception
from app.schemas.auditor import AuditorRequest, AuditorResponse, AuditorListResponse
from app.services.auditor_service import AuditorService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=AuditorListResponse)
async def list_auditors(db: Session = Depends(get_db)):
    """List all auditors ordered by name."""
    try:
        auditors = AuditorService(db).list_auditors()
        return AuditorListResponse(
            items=[AuditorResponse.model_validate(a) for a in auditors],
            total=len(auditors),
        )
    except Exception as e:
        logger.error(f"Error listing auditors: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve auditors"
        )


@router.post("/", response_model=AuditorResponse, status_code=status.HTTP_201_CREATED)
async def create_auditor(
    request: AuditorRequest,
    db: Session = Depends(get_db),
):
    """
    Create an auditor.

    Returns 409 if an auditor with the same (trimmed) name already exists.
    """
    try:
        return AuditorResponse.model_validate(AuditorService(db).create_auditor(request.name))
    except AuditTrackerError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error creating auditor: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create auditor"
        )


@router.put("/{auditor_id}", response_model=AuditorResponse)
async def rename_auditor(
    auditor_id: int,
    request: AuditorRequest,
    db: Session = Depends(get_db),
):
    """
    Rename an auditor.

    Audits recorded under the old name keep it.
    """
    try:
        return AuditorResponse.model_validate(AuditorService(db).rename_auditor(auditor_id, request.name))
    except AuditTrackerError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error renaming auditor {auditor_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update auditor"
        )


@router.delete("/{auditor_id}", status_code=status.HTTP_200_OK)
async def delete_auditor(
    auditor_id: int,
    db: Session = Depends(get_db),
):
    """Delete an auditor. Audits that name this auditor are not touched."""
    try:
        AuditorService(db).delete_auditor(auditor_id)
        return {"message": "Auditor deleted successfully", "id": auditor_id}
    except AuditTrackerError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error deleting auditor {auditor_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete auditor"
        )
