from fastapi import APIRouter, Depends, Query
from roster.context import RosterContext
from roster.schemas.user import SRAssign, Confirmation, VacationChange
from roster.services.dashboards import manager_dashboard
from roster.services.derivation import find_record, reports_of
from roster.utils.auth import get_context, require_manager
from roster.utils.responses import action_response
from datetime import date as CalendarDate

router = APIRouter()

def my_engineer(context: RosterContext, manager: dict, engineer_id: str):
    """The engineer if they report to this manager, else None."""
    return find_record(reports_of(context.users.records, manager["id"]), engineer_id)

@router.get("/")
async def get_my_team(
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_manager),
):
    return manager_dashboard(current_user, context.users.records, context.skills.records)

@router.post("/{engineer_id}/sr")
async def assign_sr(
    engineer_id: str,
    body: SRAssign,
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_manager),
):
    engineer = my_engineer(context, current_user, engineer_id)
    if engineer is None:
        return action_response(context.actions.reject(current_user, "Selected engineer not found."))
    result = await context.actions.assign_sr(current_user, engineer, force=body.force)
    return action_response(result)

@router.post("/{engineer_id}/sr/reset")
async def reset_sr(
    engineer_id: str,
    body: Confirmation,
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_manager),
):
    engineer = my_engineer(context, current_user, engineer_id)
    if engineer is None:
        return action_response(context.actions.reject(current_user, "Selected engineer not found."))
    result = await context.actions.reset_sr(current_user, engineer, confirm=body.confirm)
    return action_response(result)

@router.post("/{engineer_id}/vacations")
async def add_team_vacation(
    engineer_id: str,
    body: VacationChange,
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_manager),
):
    engineer = my_engineer(context, current_user, engineer_id)
    if engineer is None:
        return action_response(context.actions.reject(current_user, "Selected engineer not found."))
    result = await context.actions.add_vacation(
        current_user, engineer, body.date.isoformat(), confirm=body.confirm
    )
    return action_response(result)

@router.delete("/{engineer_id}/vacations/{vacation_date}")
async def remove_team_vacation(
    engineer_id: str,
    vacation_date: CalendarDate,
    confirm: bool = Query(False),
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_manager),
):
    engineer = my_engineer(context, current_user, engineer_id)
    if engineer is None:
        return action_response(context.actions.reject(current_user, "Selected engineer not found."))
    result = await context.actions.remove_vacation(
        current_user, engineer, vacation_date.isoformat(), confirm=confirm
    )
    return action_response(result)
