import secrets
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
import logging

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
CUSTOM_TOKEN_EXPIRE_MINUTES = 60


class TokenService:
    """Issues and checks the HS256 tokens behind identity sessions.

    Two token types exist: ``session`` tokens, handed out after a
    successful sign-in and carried as bearer credentials, and ``custom``
    tokens, pre-issued by an administrator and exchanged for a session.
    """

    def __init__(self, secret_key: str, session_expire_minutes: int = 720):
        if not secret_key:
            raise ValueError("SECRET_KEY is not set. Please set it in your environment variables.")
        self.secret_key = secret_key
        self.session_expire_minutes = session_expire_minutes
        # jti -> expiry of the revoked token; in-process only
        self._revoked = {}

    def _encode(self, uid: str, email: Optional[str], token_type: str, expires_in: timedelta) -> str:
        now = datetime.utcnow()
        to_encode = {
            "sub": uid,
            "email": email,
            "type": token_type,
            "jti": secrets.token_urlsafe(32),
            "iat": now.timestamp(),
            "exp": now + expires_in,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)

    def create_session_token(self, uid: str, email: Optional[str] = None) -> str:
        return self._encode(uid, email, "session", timedelta(minutes=self.session_expire_minutes))

    def create_custom_token(self, uid: str, email: Optional[str] = None) -> str:
        return self._encode(uid, email, "custom", timedelta(minutes=CUSTOM_TOKEN_EXPIRE_MINUTES))

    def decode(self, token: str, token_type: str) -> dict:
        """Decode a token of the given type, raising JWTError when it is unusable."""
        payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        if payload.get("type") != token_type:
            raise JWTError("Invalid token type")
        if not payload.get("sub") or not payload.get("jti"):
            raise JWTError("Token is missing its subject")
        if self.is_token_revoked(payload["jti"]):
            logger.debug("Token %s is revoked", payload["jti"])
            raise JWTError("Token has been revoked")
        return payload

    def revoke(self, token: str):
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except JWTError:
            # expired or forged tokens cannot be used anyway
            return
        logger.info("Revoking token: %s user: %s", payload.get("jti"), payload.get("sub"))
        self._revoked[payload["jti"]] = datetime.utcfromtimestamp(payload["exp"])

    def is_token_revoked(self, token_id: str) -> bool:
        return token_id in self._revoked

    def cleanup_expired_tokens(self):
        """Forget revocations whose tokens have expired on their own"""
        current_time = datetime.utcnow()
        expired = [jti for jti, expires_at in self._revoked.items() if current_time > expires_at]
        for jti in expired:
            del self._revoked[jti]
        return len(expired)
