"""Admin gate: a shared email/password pair taken from configuration.

This is a convenience for the admin screens, not an authentication system.
There are no accounts, roles or sessions; anyone holding the pair is the
admin. Every admin request re-sends the pair (HTTP Basic) and is checked
here, so nothing client-side is trusted.
"""
import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from app.config import get_settings

logger = logging.getLogger(__name__)

http_basic = HTTPBasic(auto_error=False)


class AdminGate:
    def __init__(self, email: Optional[str], password: Optional[str]):
        self.email = (email or "").strip().lower()
        self.password = password or ""

    @property
    def configured(self) -> bool:
        return bool(self.email and self.password)

    def check(self, email: Optional[str], password: Optional[str]) -> bool:
        if not self.configured:
            return False
        # Compare both halves so timing does not reveal which one was wrong
        email_ok = secrets.compare_digest(
            (email or "").strip().lower().encode("utf-8"), self.email.encode("utf-8")
        )
        password_ok = secrets.compare_digest(
            (password or "").encode("utf-8"), self.password.encode("utf-8")
        )
        return email_ok and password_ok


def get_admin_gate() -> AdminGate:
    settings = get_settings()
    return AdminGate(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)


def warn_admin_gate(gate: AdminGate) -> None:
    if not gate.configured:
        logger.warning("ADMIN_EMAIL/ADMIN_PASSWORD not set; admin endpoints are disabled")
    else:
        logger.warning(
            "Admin access uses a single shared credential pair; this is not real authentication"
        )


def require_admin(
    credentials: Optional[HTTPBasicCredentials] = Depends(http_basic),
    gate: AdminGate = Depends(get_admin_gate),
) -> str:
    if not gate.configured:
        raise HTTPException(status_code=403, detail="Admin access is not configured")
    if not credentials or not gate.check(credentials.username, credentials.password):
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return gate.email
