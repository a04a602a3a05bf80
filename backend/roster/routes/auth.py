from fastapi import APIRouter, Depends, HTTPException
from roster.context import RosterContext
from roster.schemas.auth import TokenSignIn, CustomTokenRequest, SessionResponse
from roster.services.session import SessionProvider
from roster.services.views import select_view, ViewState
from roster.utils.auth import get_context, get_session, require_admin
from roster.utils.logger import log_event, EventTypes

router = APIRouter()

def session_response(provider: SessionProvider) -> SessionResponse:
    return SessionResponse(
        ready=provider.is_ready,
        view=select_view(provider.current_user).value,
        currentUser=provider.current_user,
        token=provider.session_token if provider.current_user else None,
    )

@router.post("/anonymous", response_model=SessionResponse)
async def sign_in_anonymously(context: RosterContext = Depends(get_context)):
    provider = context.session_provider()
    await provider.start()
    return session_response(provider)

@router.post("/token", response_model=SessionResponse)
async def sign_in_with_token(body: TokenSignIn, context: RosterContext = Depends(get_context)):
    token = body.token or context.settings.initial_auth_token
    if not token:
        raise HTTPException(400, "No sign-in token provided")
    provider = context.session_provider()
    # A rejected token still settles the session, just without a current user
    await provider.start(token)
    return session_response(provider)

@router.post("/sign-out", response_model=SessionResponse)
async def sign_out(session: SessionProvider = Depends(get_session)):
    await session.sign_out()
    return SessionResponse(ready=True, view=ViewState.NO_SESSION.value)

@router.post("/custom-token")
async def issue_custom_token(
    body: CustomTokenRequest,
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_admin),
):
    token = context.tokens.create_custom_token(body.userId, body.email)
    log_event(EventTypes.CUSTOM_TOKEN_ISSUED, {"for_user": body.userId}, user_id=current_user["id"])
    return {"token": token, "userId": body.userId}
