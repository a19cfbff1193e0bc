"""
Service for the single shared password.

The credentials table holds exactly one row (primary key CREDENTIAL_ROW_ID). It
is created lazily with the configured default on first read, using one
INSERT ... ON CONFLICT DO NOTHING so concurrent first readers cannot create two.
"""
import hashlib
import hmac
import logging
import string
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import insert_ignoring_conflicts
from app.models.credential import CREDENTIAL_ROW_ID, Credential

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password using SHA-256 with the configured salt."""
    return hashlib.sha256(f"{settings.PASSWORD_SALT}{password}".encode()).hexdigest()


def verify_password_hash(raw_password: str, password_hash: str) -> bool:
    """Constant-time comparison of a raw password against its stored hash."""
    return hmac.compare_digest(hash_password(raw_password), password_hash)


def check_password_strength(password: str) -> Optional[str]:
    """
    Check a new password against the policy.

    Returns:
        None when acceptable, otherwise a message naming the rule that failed
    """
    min_length = settings.PASSWORD_MIN_LENGTH
    if len(password) < min_length:
        return f"New password must be at least {min_length} characters long."

    if settings.PASSWORD_REQUIRE_COMPLEXITY:
        if not any(c.isupper() for c in password):
            return "New password must contain at least one uppercase letter."
        if not any(c.islower() for c in password):
            return "New password must contain at least one lowercase letter."
        if not any(c.isdigit() for c in password):
            return "New password must contain at least one digit."
        if not any(c in string.punctuation for c in password):
            return "New password must contain at least one symbol."

    return None


@dataclass
class CredentialUpdateResult:
    success: bool
    message: str


class CredentialService:
    """Verify and change the shared password."""

    def __init__(self, db: Session):
        self.db = db

    def ensure_default(self) -> str:
        """
        Return the stored password hash, creating the default row if there is none.

        Safe under concurrent first access: the insert is a single statement that
        does nothing when the row already exists.
        """
        self.db.execute(
            insert_ignoring_conflicts(
                self.db,
                Credential,
                id=CREDENTIAL_ROW_ID,
                value=hash_password(settings.DEFAULT_PASSWORD),
            )
        )
        self.db.commit()
        return self.db.execute(
            select(Credential.value).where(Credential.id == CREDENTIAL_ROW_ID)
        ).scalar_one()

    def verify(self, candidate: Optional[str]) -> bool:
        """True when ``candidate`` matches the stored password. Empty is always False."""
        if not candidate:
            return False
        return verify_password_hash(candidate, self.ensure_default())

    def update(self, old_password: Optional[str], new_password: Optional[str]) -> CredentialUpdateResult:
        """
        Change the password.

        Expected mistakes (missing fields, weak password, wrong old password) come
        back as ``success=False`` with a message rather than as exceptions.
        """
        if not old_password or not new_password:
            return CredentialUpdateResult(False, "Both old and new passwords are required.")

        problem = check_password_strength(new_password)
        if problem:
            return CredentialUpdateResult(False, problem)

        stored = self.ensure_default()
        if not verify_password_hash(old_password, stored):
            logger.warning("Password update rejected: old password did not match")
            return CredentialUpdateResult(False, "The old password is not correct.")

        # Conditional on the hash just read, so a concurrent change is not overwritten
        result = self.db.execute(
            update(Credential)
            .where(Credential.id == CREDENTIAL_ROW_ID, Credential.value == stored)
            .values(value=hash_password(new_password))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            return CredentialUpdateResult(False, "The old password is not correct.")
        self.db.commit()

        logger.info("Shared password updated")
        return CredentialUpdateResult(True, "Password updated successfully.")
