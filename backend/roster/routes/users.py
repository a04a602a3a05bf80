from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional
from roster.context import RosterContext
from roster.schemas.user import UserCreate, UserUpdate
from roster.services.dashboards import user_row
from roster.services.derivation import find_record
from roster.utils.auth import get_context, require_admin
from roster.utils.responses import action_response

router = APIRouter()

def get_cached_user(context: RosterContext, user_id: str) -> dict:
    user = find_record(context.users.records, user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return user

@router.get("/")
async def list_users(
    role: Optional[str] = None,
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_admin),
):
    users = context.users.records
    rows = [user_row(u, users, context.skills.records) for u in users]
    if role:
        rows = [row for row in rows if row["role"] == role]
    return {"items": rows, "total": len(rows), "loading": context.users.loading}

@router.post("/")
async def create_user(
    user: UserCreate,
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_admin),
):
    result = await context.actions.create_user(current_user, user.model_dump(mode="json"))
    return action_response(result)

@router.put("/{user_id}")
async def update_user(
    user_id: str,
    user_update: UserUpdate,
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_admin),
):
    existing = get_cached_user(context, user_id)
    changes = user_update.model_dump(mode="json", exclude_unset=True)
    result = await context.actions.update_user(current_user, existing, changes)
    return action_response(result)

@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    confirm: bool = Query(False),
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_admin),
):
    existing = get_cached_user(context, user_id)
    result = await context.actions.delete_user(current_user, existing, confirm=confirm)
    return action_response(result)
