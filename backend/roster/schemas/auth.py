from pydantic import BaseModel
from typing import Optional
from roster.schemas.user import UserOut

class TokenSignIn(BaseModel):
    token: Optional[str] = None  # falls back to INITIAL_AUTH_TOKEN when omitted

class CustomTokenRequest(BaseModel):
    userId: str
    email: Optional[str] = None

class SessionResponse(BaseModel):
    ready: bool
    view: str
    currentUser: Optional[UserOut] = None
    token: Optional[str] = None
    token_type: str = "bearer"
