"""
Session context handed to every console view.
"""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, MutableMapping, Optional

SESSION_USER_KEY = "user"
SESSION_TOKEN_KEY = "token"
SESSION_ID_KEY = "sid"


@dataclass
class SessionContext:
    """
    The signed-in user of one browser session.

    Login stores it, logout clears it. There is no expiry and no refresh;
    the context lives as long as the session cookie.
    """
    session_id: str
    user: Dict[str, Any] = field(default_factory=dict)
    token: Optional[str] = None

    @property
    def username(self) -> str:
        return str(self.user.get("username") or self.user.get("email") or "")

    @classmethod
    def from_session(cls, session: MutableMapping[str, Any]) -> Optional["SessionContext"]:
        """Rebuild the context from the session store, or None when signed out."""
        user = session.get(SESSION_USER_KEY)
        if not user:
            return None
        return cls(
            session_id=session.get(SESSION_ID_KEY) or "",
            user=user,
            token=session.get(SESSION_TOKEN_KEY),
        )

    def store(self, session: MutableMapping[str, Any]) -> None:
        session[SESSION_ID_KEY] = self.session_id
        session[SESSION_USER_KEY] = self.user
        if self.token:
            session[SESSION_TOKEN_KEY] = self.token
        else:
            session.pop(SESSION_TOKEN_KEY, None)

    @staticmethod
    def clear(session: MutableMapping[str, Any]) -> None:
        session.pop(SESSION_USER_KEY, None)
        session.pop(SESSION_TOKEN_KEY, None)
        session.pop(SESSION_ID_KEY, None)


def new_session_id() -> str:
    return uuid.uuid4().hex
