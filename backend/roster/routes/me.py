from fastapi import APIRouter, Depends, Query
from roster.context import RosterContext
from roster.schemas.user import VacationChange
from roster.services.dashboards import profile_card
from roster.utils.auth import get_context, require_known_role
from roster.utils.responses import action_response
from datetime import date as CalendarDate

router = APIRouter()

@router.get("/")
async def get_my_profile(
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_known_role),
):
    return profile_card(current_user, context.users.records, context.skills.records)

@router.post("/vacations")
async def request_vacation(
    body: VacationChange,
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_known_role),
):
    result = await context.actions.add_vacation(
        current_user, current_user, body.date.isoformat(), confirm=body.confirm
    )
    return action_response(result)

@router.delete("/vacations/{vacation_date}")
async def remove_my_vacation(
    vacation_date: CalendarDate,
    confirm: bool = Query(False),
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_known_role),
):
    result = await context.actions.remove_vacation(
        current_user, current_user, vacation_date.isoformat(), confirm=confirm
    )
    return action_response(result)
