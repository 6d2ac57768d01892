"""
App state container — the signed-in user and the last user-facing error.

Kept apart from rendering so it can be read and written on its own.
"""

from typing import Optional

from pi_demo.models.session import Session


class AppState:
    def __init__(self) -> None:
        self._session: Optional[Session] = None
        self._error: Optional[str] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def current_user(self) -> Optional[str]:
        return self._session.username if self._session else None

    @property
    def error(self) -> Optional[str]:
        return self._error

    def set_user(self, session: Session) -> None:
        if self._session is not None:
            raise RuntimeError("Session already set")
        self._session = session

    def set_error(self, message: str) -> None:
        self._error = message

    def clear_error(self) -> None:
        self._error = None
