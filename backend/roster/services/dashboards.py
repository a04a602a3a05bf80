"""
View models for the four role dashboards and the two dead-end screens.

Each builder is recomputed from the latest cached snapshots on every
request; nothing is kept between calls.
"""
from typing import List, Optional

from roster.models.user import Role
from roster.services.derivation import (
    group_by_manager,
    manager_name,
    reports_of,
    resolve_skill_names,
    sr_display,
    sr_status,
    unassigned_or_admins,
)
from roster.services.views import ViewState


def user_row(user: dict, users: List[dict], skills: List[dict]) -> dict:
    skill_names = resolve_skill_names(user.get("skills"), skills)
    return {
        "id": user["id"],
        "name": user.get("name", ""),
        "email": user.get("email", ""),
        "role": user.get("role"),
        "managerId": user.get("managerId"),
        "managerName": manager_name(users, user),
        "workingHours": user.get("workingHours") or "N/A",
        "shiftPattern": user.get("shiftPattern") or "N/A",
        "skillNames": skill_names,
        "skillsDisplay": ", ".join(skill_names) or "N/A",
        "srDisplay": sr_display(user),
        "vacationDates": list(user.get("vacationDates") or []),
    }


def sr_row(engineer: dict) -> dict:
    status = sr_status(engineer)
    return {
        "id": engineer["id"],
        "name": engineer.get("name", ""),
        "currentSrCount": status.current,
        "srThreshold": status.threshold,
        "overThreshold": status.over,
    }


def overall_roster(users: List[dict], skills: List[dict]) -> dict:
    """Everyone grouped under their manager, with the unassigned listed apart."""
    # Admins alone still count as an empty roster
    staffed = any(
        u.get("role") in (Role.MANAGER.value, Role.ENGINEER.value, Role.VIEWER.value) for u in users
    )
    return {
        "empty": not staffed,
        "teams": [
            {
                "manager": user_row(manager, users, skills),
                "members": [user_row(u, users, skills) for u in members],
            }
            for manager, members in group_by_manager(users)
        ],
        "otherUsers": [user_row(u, users, skills) for u in unassigned_or_admins(users)],
    }


def admin_dashboard(current_user: dict, users: List[dict], skills: List[dict]) -> dict:
    return {
        "view": ViewState.ADMIN.value,
        "users": [user_row(u, users, skills) for u in users],
        "skills": [{"id": s["id"], "name": s.get("name", "")} for s in skills],
        "roster": overall_roster(users, skills),
        # choices offered by the add/edit user form
        "managers": [{"id": u["id"], "name": u.get("name", "")} for u in users if u.get("role") == Role.MANAGER.value],
        "roles": [role.value for role in Role],
    }


def manager_dashboard(current_user: dict, users: List[dict], skills: List[dict]) -> dict:
    team = reports_of(users, current_user["id"])
    return {
        "view": ViewState.MANAGER.value,
        "teamRoster": [user_row(u, users, skills) for u in team],
        "srAssignment": [sr_row(u) for u in team],
        "vacations": [
            {"id": u["id"], "name": u.get("name", ""), "vacationDates": list(u.get("vacationDates") or [])}
            for u in team
        ],
    }


def profile_card(current_user: dict, users: List[dict], skills: List[dict]) -> dict:
    card = user_row(current_user, users, skills)
    if current_user.get("role") != Role.ENGINEER.value:
        card.pop("srDisplay")
    return card


def engineer_dashboard(current_user: dict, users: List[dict], skills: List[dict]) -> dict:
    return {
        "view": ViewState.ENGINEER.value,
        "profile": profile_card(current_user, users, skills),
    }


def viewer_dashboard(current_user: dict, users: List[dict], skills: List[dict]) -> dict:
    return {
        "view": ViewState.VIEWER.value,
        "profile": profile_card(current_user, users, skills),
        "roster": overall_roster(users, skills),
    }


def no_session_screen(user_id: Optional[str] = None) -> dict:
    return {
        "view": ViewState.NO_SESSION.value,
        "title": "Welcome to Team Roster",
        "message": "You are not signed in or your user profile is not yet configured by an Admin.",
        "userId": user_id or "N/A",
        "actions": ["sign-out"],
    }


def unknown_role_screen(current_user: dict) -> dict:
    return {
        "view": ViewState.UNKNOWN_ROLE.value,
        "title": "Access Denied",
        "message": "Your role is not recognized or not yet assigned. Please contact an administrator.",
        "userId": current_user.get("id") or "N/A",
        "actions": ["sign-out"],
    }


_BUILDERS = {
    ViewState.ADMIN: admin_dashboard,
    ViewState.MANAGER: manager_dashboard,
    ViewState.ENGINEER: engineer_dashboard,
    ViewState.VIEWER: viewer_dashboard,
}


def build_dashboard(view: ViewState, current_user: Optional[dict], users: List[dict], skills: List[dict],
                    session_uid: Optional[str] = None) -> dict:
    if view == ViewState.NO_SESSION:
        return no_session_screen(session_uid)
    if view == ViewState.UNKNOWN_ROLE:
        return unknown_role_screen(current_user)
    return _BUILDERS[view](current_user, users, skills)
