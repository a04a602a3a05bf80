import logging
from typing import Optional

from roster.config import CollectionPaths
from roster.models.user import default_profile
from roster.services.identity import IdentityProvider, Session
from roster.utils.logger import log_event, log_error, log_warning, EventTypes

logger = logging.getLogger(__name__)


class SessionProvider:
    """Tracks who the current user is for one identity handle.

    ``is_ready`` turns true once the first sign-in attempt has settled,
    whatever its outcome; a failed attempt leaves ``current_user`` unset.
    """

    def __init__(self, identity: IdentityProvider, store, paths: CollectionPaths):
        self.identity = identity
        self.store = store
        self.paths = paths
        self.current_user: Optional[dict] = None
        self.is_ready = False
        self._unsubscribe = identity.on_session_change(self._on_session_change)

    async def _on_session_change(self, session: Optional[Session]):
        if session is None:
            if self.current_user is not None:
                log_event(EventTypes.SESSION_ENDED, user_id=self.current_user["id"])
            self.current_user = None
        else:
            self.current_user = await self.resolve_profile(session)
        self.is_ready = True

    async def resolve_profile(self, session: Session) -> Optional[dict]:
        """Look up the User record keyed by the session uid, creating a Viewer profile if absent."""
        try:
            record = await self.store.get_document(self.paths.users, session.uid)
            if record is not None:
                return {**record, "id": session.uid}

            log_warning("User document not found. Creating a default Viewer user.", user_id=session.uid)
            profile = default_profile(session.uid, session.email)
            await self.store.set_document(self.paths.users, session.uid, profile)
            log_event(EventTypes.PROFILE_CREATED, {"role": profile["role"]}, user_id=session.uid)
            return {**profile, "id": session.uid}
        except Exception as e:
            log_error("Failed to resolve user profile", e, user_id=session.uid)
            return None

    async def start(self, token: Optional[str] = None):
        """Sign in with a pre-issued token when one is given, anonymously otherwise."""
        try:
            if token:
                await self.identity.sign_in_with_token(token)
            else:
                await self.identity.sign_in_anonymously()
            if self.current_user is not None:
                log_event(EventTypes.SESSION_STARTED, user_id=self.current_user["id"])
        except Exception as e:
            log_error("Error during sign-in", e)
        finally:
            self.is_ready = True

    async def restore(self, session_token: Optional[str]):
        """Resume a session from a bearer token; no token means no session."""
        try:
            if session_token:
                await self.identity.restore(session_token)
        except Exception as e:
            log_warning(f"Could not restore session: {e}")
        finally:
            self.is_ready = True

    async def sign_out(self):
        await self.identity.sign_out()

    def stop(self):
        self._unsubscribe()

    @property
    def session_token(self) -> Optional[str]:
        session = self.identity.current_session
        return session.token if session else None
