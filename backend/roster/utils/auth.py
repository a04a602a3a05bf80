from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from roster.context import RosterContext
from roster.models.user import Role
from roster.services.session import SessionProvider
import logging

logger = logging.getLogger(__name__)

# Missing credentials are not an error here: they simply mean "no session"
security = HTTPBearer(auto_error=False)

def get_context(request: Request) -> RosterContext:
    return request.app.state.roster

async def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    context: RosterContext = Depends(get_context),
) -> SessionProvider:
    provider = context.session_provider()
    await provider.restore(credentials.credentials if credentials else None)
    return provider

async def get_current_user(session: SessionProvider = Depends(get_session)) -> dict:
    if session.current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session.current_user

def verify_role(required_roles: list):
    def role_checker(current_user: dict = Depends(get_current_user)):
        if current_user.get("role") not in required_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions"
            )
        return current_user
    return role_checker

# Role-specific dependencies
require_admin = verify_role([Role.ADMIN.value])
require_manager = verify_role([Role.MANAGER.value])
require_known_role = verify_role([role.value for role in Role])
