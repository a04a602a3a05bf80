from fastapi import APIRouter, HTTPException, Depends, Query
from roster.context import RosterContext
from roster.schemas.skill import SkillIn, SkillOut
from roster.services.derivation import find_record
from roster.utils.auth import get_context, require_admin
from roster.utils.responses import action_response

router = APIRouter()

def get_cached_skill(context: RosterContext, skill_id: str) -> dict:
    skill = find_record(context.skills.records, skill_id)
    if not skill:
        raise HTTPException(404, "Skill not found")
    return skill

@router.get("/")
async def list_skills(
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_admin),
):
    items = [SkillOut(id=s["id"], name=s.get("name", "")) for s in context.skills.records]
    return {"items": items, "total": len(items), "loading": context.skills.loading}

@router.post("/")
async def create_skill(
    skill: SkillIn,
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_admin),
):
    result = await context.actions.create_skill(current_user, skill.name)
    return action_response(result)

@router.put("/{skill_id}")
async def update_skill(
    skill_id: str,
    skill: SkillIn,
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_admin),
):
    existing = get_cached_skill(context, skill_id)
    result = await context.actions.update_skill(current_user, existing, skill.name)
    return action_response(result)

@router.delete("/{skill_id}")
async def delete_skill(
    skill_id: str,
    confirm: bool = Query(False),
    context: RosterContext = Depends(get_context),
    current_user: dict = Depends(require_admin),
):
    existing = get_cached_skill(context, skill_id)
    result = await context.actions.delete_skill(current_user, existing, confirm=confirm)
    return action_response(result)
