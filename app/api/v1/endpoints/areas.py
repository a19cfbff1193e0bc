"""
Area reference endpoints.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.auditor import AreaResponse, AreaListResponse
from app.services.auditor_service import list_areas

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=AreaListResponse)
async def get_areas(db: Session = Depends(get_db)):
    """List the predefined areas ordered by name."""
    try:
        areas = list_areas(db)
        return AreaListResponse(
            items=[AreaResponse.model_validate(area) for area in areas],
            total=len(areas),
        )
    except Exception as e:
        logger.error(f"Error listing areas: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve areas"
        )
