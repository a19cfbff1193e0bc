"""
Safety audit endpoints.
"""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuditTrackerError, to_http_exception
from app.models.audit import AuditStatus, RiskPotential, RISK_TYPES
from app.schemas.audit import (
    AuditCreateRequest,
    AuditUpdateRequest,
    AuditResponse,
    AuditListResponse,
    AuditOptionsResponse,
    AuditStatsResponse,
    AuditTrendsResponse,
    ImportAuditsRequest,
    ImportAuditsResponse,
    UploadUrlRequest,
    UploadUrlResponse,
)
from app.services.audit_service import AuditService, page_size
from app.services.import_service import ImportService, parse_tsv
from app.services.photo_storage import PhotoStorage, get_photo_storage
from app.services.query_builder import AuditFilter
from app.services.stats_service import StatsService

logger = logging.getLogger(__name__)

router = APIRouter()


# IMPORTANT: Static routes must be defined BEFORE path parameters
# Otherwise FastAPI will try to parse "stats" and "trends" as audit_id integers


@router.get("/stats", response_model=AuditStatsResponse)
async def get_audit_stats(db: Session = Depends(get_db)):
    """
    Get snapshot statistics over all audits.

    Returns totals (resolved + pending == total) and counts by potential,
    area, risk type and status.
    """
    try:
        return AuditStatsResponse(**StatsService(db).get_stats())
    except Exception as e:
        logger.error(f"Error generating audit stats: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate audit stats"
        )


@router.get("/trends", response_model=AuditTrendsResponse)
async def get_audit_trends(db: Session = Depends(get_db)):
    """
    Get trend summaries.

    - Monthly totals for the trailing 12 months
    - Per-area resolution rate and average resolution time
    - Risk type distribution
    """
    try:
        return AuditTrendsResponse(**StatsService(db).get_trends())
    except Exception as e:
        logger.error(f"Error generating audit trends: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate audit trends"
        )


@router.get("/options", response_model=AuditOptionsResponse)
async def get_audit_options():
    """Conventional potentials, statuses and risk types for form selection lists."""
    return AuditOptionsResponse(
        potentials=[p.value for p in RiskPotential],
        statuses=[s.value for s in AuditStatus],
        risk_types=list(RISK_TYPES),
    )


@router.post("/import", response_model=ImportAuditsResponse)
async def import_audits(
    request: ImportAuditsRequest,
    db: Session = Depends(get_db),
):
    """
    Import audit rows given as JSON.

    Rows are inserted one by one; failures are reported per row and do not
    undo rows already imported.
    """
    result = ImportService(db).import_rows(request.audits)
    return ImportAuditsResponse(imported=result.imported, errors=result.errors)


@router.post("/import/tsv", response_model=ImportAuditsResponse)
async def import_audits_tsv(
    file: UploadFile = File(..., description="Tab-separated export, first line is a header"),
    db: Session = Depends(get_db),
):
    """
    Import audit rows from a tab-separated spreadsheet export.

    Columns by position: timestamp, area, auditor, date, risk type, potential,
    description, responsible, deadline, status, action description, photos.
    """
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size exceeds maximum allowed size of {settings.MAX_UPLOAD_SIZE} bytes"
        )

    rows = parse_tsv(content.decode("utf-8-sig", errors="replace"))
    logger.info(f"Parsed {len(rows)} rows from import file '{file.filename}'")

    result = ImportService(db).import_rows(rows)
    return ImportAuditsResponse(imported=result.imported, errors=result.errors)


@router.post("/upload-url", response_model=UploadUrlResponse)
async def get_upload_url(
    request: UploadUrlRequest,
    storage: PhotoStorage = Depends(get_photo_storage),
):
    """
    Get a short-lived presigned URL to upload one audit photo.

    The client PUTs the image to ``upload_url`` and stores ``file_url`` on the audit.
    """
    try:
        target = storage.create_upload_target(request.filename)
        return UploadUrlResponse(
            upload_url=target.upload_url,
            file_url=target.file_url,
            object_name=target.object_name,
        )
    except AuditTrackerError as e:
        logger.error(f"Error issuing upload URL: {e.message}")
        raise to_http_exception(e)


@router.delete("/photos/{filename}", status_code=status.HTTP_200_OK)
async def delete_photo(
    filename: str,
    storage: PhotoStorage = Depends(get_photo_storage),
):
    """Delete an audit photo from storage."""
    try:
        storage.delete_photo(filename)
        return {"message": "Photo deleted successfully", "filename": filename}
    except AuditTrackerError as e:
        raise to_http_exception(e)


@router.get("/", response_model=AuditListResponse)
async def list_audits(
    area: Optional[str] = Query(None, description="Filter by area"),
    auditor: Optional[str] = Query(None, description="Filter by auditor name"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    potential: Optional[str] = Query(None, description="Filter by potential"),
    risk_type: Optional[str] = Query(None, description="Filter by risk type"),
    start_date: Optional[date] = Query(None, description="Audit date from (inclusive, YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="Audit date until (inclusive, YYYY-MM-DD)"),
    limit: Optional[int] = Query(None, ge=1, description="Page size, capped at MAX_PAGE_SIZE"),
    offset: int = Query(0, ge=0, description="Number of audits to skip"),
    db: Session = Depends(get_db),
):
    """
    List audits with optional filters, newest submission first.

    ``total`` counts every audit matching the same filters.
    """
    filters = AuditFilter(
        area=area,
        auditor=auditor,
        status=status_filter,
        potential=potential,
        risk_type=risk_type,
        start_date=start_date,
        end_date=end_date,
    )
    limit = page_size(limit)
    try:
        audits, total = AuditService(db).list_audits(filters, limit=limit, offset=offset)

        logger.info(f"Retrieved {len(audits)} audits (total: {total})")

        return AuditListResponse(
            items=[AuditResponse.model_validate(audit) for audit in audits],
            total=total,
            limit=limit,
            offset=offset,
        )
    except Exception as e:
        logger.error(f"Error listing audits: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve audits"
        )


@router.post("/", response_model=AuditResponse, status_code=status.HTTP_201_CREATED)
async def create_audit(
    request: AuditCreateRequest,
    db: Session = Depends(get_db),
):
    """Record a new audit."""
    try:
        audit = AuditService(db).create_audit(request.model_dump())
        return AuditResponse.model_validate(audit)
    except Exception as e:
        logger.error(f"Error creating audit: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create audit"
        )


@router.get("/{audit_id}", response_model=AuditResponse)
async def get_audit(
    audit_id: int,
    db: Session = Depends(get_db),
):
    """Get a single audit by ID."""
    try:
        return AuditResponse.model_validate(AuditService(db).get_audit(audit_id))
    except AuditTrackerError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error retrieving audit {audit_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve audit"
        )


@router.put("/{audit_id}", response_model=AuditResponse)
async def update_audit(
    audit_id: int,
    request: AuditUpdateRequest,
    db: Session = Depends(get_db),
):
    """
    Partially update an audit.

    Only fields present in the body are changed. An empty body is rejected with 400.
    """
    try:
        audit = AuditService(db).update_audit(audit_id, request.model_dump(exclude_unset=True))
        return AuditResponse.model_validate(audit)
    except AuditTrackerError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating audit {audit_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update audit"
        )


@router.delete("/{audit_id}", status_code=status.HTTP_200_OK)
async def delete_audit(
    audit_id: int,
    db: Session = Depends(get_db),
):
    """Delete an audit."""
    try:
        AuditService(db).delete_audit(audit_id)
        return {"message": "Audit deleted successfully", "id": audit_id}
    except AuditTrackerError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error deleting audit {audit_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete audit"
        )
