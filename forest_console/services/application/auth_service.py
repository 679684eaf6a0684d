"""
Application service: sign-in and sign-up against the backend.
"""
import logging

from forest_console.api.models.forms import LoginForm, SignupForm
from forest_console.domain.session import SessionContext, new_session_id
from forest_console.infrastructure.api_client import GatewayError, NetworkError, ServerError
from forest_console.infrastructure.gateway import AuthGateway

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Sign-in or sign-up was refused; the message is shown to the user."""


class AuthService:
    """
    Turns backend login/signup responses into a ``SessionContext``.

    The backend answers with ``{"user": {...}}`` and optionally a ``token``.
    Nothing beyond the presence of a user is checked.
    """

    def __init__(self, gateway: AuthGateway):
        self.gateway = gateway

    async def login(self, form: LoginForm) -> SessionContext:
        """
        Sign in an existing user.

        Raises:
            AuthError: If the backend refuses the credentials or is unreachable
        """
        data = await self._call("login", self.gateway.login(form.username, form.password))
        return self._context(data)

    async def signup(self, form: SignupForm) -> SessionContext:
        """
        Register a new admin user and sign them in.

        Raises:
            AuthError: If the backend refuses the registration or is unreachable
        """
        data = await self._call(
            "signup",
            self.gateway.signup(form.username, form.email, form.password),
        )
        return self._context(data)

    async def _call(self, action, pending):
        try:
            return await pending
        except NetworkError as e:
            logger.error("Auth %s failed: %s", action, e)
            raise AuthError("Connection error. Please make sure the backend is running.") from e
        except ServerError as e:
            logger.warning("Auth %s refused: %s", action, e)
            raise AuthError(e.detail or "Authentication failed") from e
        except GatewayError as e:
            logger.error("Auth %s failed: %s", action, e)
            raise AuthError("Authentication failed") from e

    @staticmethod
    def _context(data) -> SessionContext:
        if not isinstance(data, dict) or not data.get("user"):
            raise AuthError("Authentication failed")
        return SessionContext(
            session_id=new_session_id(),
            user=data["user"],
            token=data.get("token"),
        )
