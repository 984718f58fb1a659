# wallet/security.py
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from wallet.errors import Unauthorized
from wallet.models import AuthUser

logger = logging.getLogger("wallet.auth")


class AuthSession:
    """
    Bearer token + signed-in user, kept in memory for one client.
    Passed explicitly to the API client (no module-level store).
    """

    def __init__(self, token: Optional[str] = None, user: Optional[AuthUser] = None):
        self.token = token
        self.user = user
        self._on_unauthorized: List[Callable[[], None]] = []

    # ------------ state ------------

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def active_user_id(self) -> Optional[int]:
        return self.user.id if self.user else None

    @property
    def active_user_name(self) -> Optional[str]:
        return self.user.name if self.user else None

    def login(self, token: str, user: AuthUser) -> None:
        self.token = token
        self.user = user

    def logout(self) -> None:
        self.token = None
        self.user = None

    # ------------ helpers ------------

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def require_user_id(self) -> int:
        """
        Ensure someone is signed in. If not, raise Unauthorized so the caller
        runs its sign-in flow.
        """
        uid = self.active_user_id
        if uid is None:
            raise Unauthorized("Please sign in to continue.", 401)
        return uid

    def on_unauthorized(self, callback: Callable[[], None]) -> None:
        """Register a callback fired when the backend rejects our token."""
        self._on_unauthorized.append(callback)

    def expire(self) -> None:
        """Token rejected: forget it, then tell listeners to re-authenticate."""
        logger.warning("session expired for user=%s", self.active_user_id)
        self.logout()
        for cb in list(self._on_unauthorized):
            cb()


__all__ = ["AuthSession"]
