"""
Access gate for the edit view.

A shared passcode, not real access control. Kept behind AccessGate so it can
be swapped for proper authentication without touching the routers.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from epoxymix.settings import AppSettings

logger = logging.getLogger(__name__)


class AccessGate:
    """Checks a passcode against a static shared secret."""

    def __init__(self, secret: str):
        self._secret = secret

    def verify(self, passcode: Optional[str]) -> bool:
        if not passcode:
            return False
        return secrets.compare_digest(passcode.strip().encode(), self._secret.encode())


_gate_instance: Optional[AccessGate] = None


def get_access_gate() -> AccessGate:
    """Get singleton gate."""
    global _gate_instance
    if _gate_instance is None:
        _gate_instance = AccessGate(AppSettings.get_config().edit_passcode)
    return _gate_instance


def reset_access_gate() -> None:
    """Reset singleton."""
    global _gate_instance
    _gate_instance = None


def require_edit_access(x_edit_passcode: Optional[str] = Header(default=None)) -> None:
    """FastAPI dependency guarding the edit endpoints."""
    if not get_access_gate().verify(x_edit_passcode):
        logger.warning("Rejected edit request: invalid passcode")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid passcode",
        )
