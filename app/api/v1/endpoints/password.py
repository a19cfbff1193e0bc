"""
Shared password endpoints.

Wrong or weak passwords are normal user mistakes: they are answered with
200 and a false flag / message, never with an error status.
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.password import (
    PasswordVerifyRequest,
    PasswordVerifyResponse,
    PasswordUpdateRequest,
    PasswordUpdateResponse,
)
from app.services.credential_service import CredentialService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/verify", response_model=PasswordVerifyResponse)
async def verify_password(
    request: PasswordVerifyRequest,
    db: Session = Depends(get_db),
):
    """Check a password against the shared password."""
    valid = CredentialService(db).verify(request.password)
    if not valid:
        logger.info("Password verification failed")
    return PasswordVerifyResponse(valid=valid)


@router.post("/update", response_model=PasswordUpdateResponse)
async def update_password(
    request: PasswordUpdateRequest,
    db: Session = Depends(get_db),
):
    """Change the shared password, given the current one."""
    result = CredentialService(db).update(request.old_password, request.new_password)
    return PasswordUpdateResponse(success=result.success, message=result.message)
