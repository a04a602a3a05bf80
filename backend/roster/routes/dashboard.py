from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from roster.context import RosterContext
from roster.schemas.auth import SessionResponse
from roster.services.dashboards import build_dashboard
from roster.services.session import SessionProvider
from roster.services.views import select_view
from roster.utils.auth import get_context, get_session

router = APIRouter()

@router.get("/session", response_model=SessionResponse)
async def get_session_state(session: SessionProvider = Depends(get_session)):
    return SessionResponse(
        ready=session.is_ready,
        view=select_view(session.current_user).value,
        currentUser=session.current_user,
    )

@router.get("/dashboard")
async def get_dashboard(
    session: SessionProvider = Depends(get_session),
    context: RosterContext = Depends(get_context),
):
    """Return the dashboard for the caller's role, built from the live caches.

    While either collection is still loading only ``{"loading": true}`` is
    returned; a failed subscription turns into the full-page error state.
    """
    if not session.is_ready or context.loading:
        return {"loading": True}

    if context.error:
        return JSONResponse(
            status_code=503,
            content={
                "loading": False,
                "view": "Error",
                "title": "Error Loading Application",
                "message": context.error,
                "hint": "Please try refreshing the page.",
            },
        )

    current_user = session.current_user
    view = select_view(current_user)
    identity = session.identity.current_session
    dashboard = build_dashboard(
        view,
        current_user,
        context.users.records,
        context.skills.records,
        session_uid=identity.uid if identity else None,
    )
    dashboard["loading"] = False
    dashboard["status"] = context.status.get(current_user["id"]) if current_user else None
    if current_user:
        dashboard["welcome"] = f"Welcome, {current_user.get('name')} ({current_user.get('role')})"
    return dashboard
