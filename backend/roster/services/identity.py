import secrets
import logging
from typing import Callable, List, Optional

from roster.services.token_service import TokenService
from roster.utils.callbacks import emit

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, uid: str, token: str, email: Optional[str] = None, anonymous: bool = False):
        self.uid = uid
        self.token = token
        self.email = email
        self.anonymous = anonymous


class IdentityProvider:
    """
    One client's handle on the identity service.
    Routes and the session provider only talk to this class; the session
    tokens behind it come from TokenService.
    """

    def __init__(self, tokens: TokenService):
        self.tokens = tokens
        self.current_session: Optional[Session] = None
        self._listeners: List[Callable] = []

    def on_session_change(self, callback: Callable) -> Callable[[], None]:
        """Register a listener called with the new Session, or None on sign-out."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def _change_session(self, session: Optional[Session]):
        self.current_session = session
        for listener in list(self._listeners):
            await emit(listener, session)

    async def sign_in_anonymously(self) -> Session:
        uid = secrets.token_urlsafe(21)
        session = Session(uid, self.tokens.create_session_token(uid), anonymous=True)
        logger.info("Anonymous sign-in for %s", uid)
        await self._change_session(session)
        return session

    async def sign_in_with_token(self, custom_token: str) -> Session:
        """Exchange a pre-issued token for a session. Raises JWTError when rejected."""
        payload = self.tokens.decode(custom_token, "custom")
        uid = payload["sub"]
        email = payload.get("email")
        session = Session(uid, self.tokens.create_session_token(uid, email), email=email)
        logger.info("Token sign-in for %s", uid)
        await self._change_session(session)
        return session

    async def restore(self, session_token: str) -> Session:
        """Re-establish a session from a bearer token issued earlier."""
        payload = self.tokens.decode(session_token, "session")
        session = Session(payload["sub"], session_token, email=payload.get("email"))
        await self._change_session(session)
        return session

    async def sign_out(self):
        if self.current_session is not None:
            self.tokens.revoke(self.current_session.token)
        await self._change_session(None)
