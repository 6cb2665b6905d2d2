"""Shared-secret gate in front of the content editor.

This is a deterrent, not a security boundary: the secret ships with
the client configuration and the content store is writable by anyone
who can reach it.  No hashing, rate limiting, or audit trail.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping

from generalis.errors import AccessDenied

logger = logging.getLogger(__name__)

SESSION_FLAG_KEY = "generalis_admin_auth"
DEFAULT_SECRET_KEY = "1234"
DENIED_MESSAGE = "Incorrect secret key."


class AuthState:
    """Whether the editor is unlocked for the current session.

    Optionally bound to a session-scoped mapping (the equivalent of
    browser session storage) so the flag lives exactly as long as that
    mapping does.
    """

    def __init__(
        self,
        unlocked: bool | None = None,
        session: MutableMapping[str, str] | None = None,
    ) -> None:
        if unlocked is None:
            # Restore from the session, defaulting to locked.
            unlocked = session is not None and session.get(SESSION_FLAG_KEY) == "true"
        self._unlocked = unlocked
        self._session = session
        if unlocked and session is not None:
            session[SESSION_FLAG_KEY] = "true"

    @property
    def unlocked(self) -> bool:
        return self._unlocked

    def grant(self) -> None:
        self._unlocked = True
        if self._session is not None:
            self._session[SESSION_FLAG_KEY] = "true"

    def require(self) -> None:
        """Raise AccessDenied unless unlocked."""
        if not self._unlocked:
            raise AccessDenied("The editor is locked. Enter the secret key first.")


class AccessGate:
    """Unlocks an AuthState when given the configured secret."""

    def __init__(self, state: AuthState, secret_key: str = DEFAULT_SECRET_KEY) -> None:
        self.state = state
        self._secret_key = secret_key

    def unlock(self, secret: str) -> bool:
        """Return True if access is granted.

        A wrong secret never re-locks a state that is already unlocked.
        """
        if secret == self._secret_key:
            self.state.grant()
            logger.info("Editor unlocked")
            return True
        logger.info("Editor unlock denied")
        return False
