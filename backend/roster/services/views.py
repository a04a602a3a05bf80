from enum import Enum
from typing import Optional

from roster.models.user import Role


class ViewState(str, Enum):
    NO_SESSION = "NoSession"
    ADMIN = "Admin"
    MANAGER = "Manager"
    ENGINEER = "Engineer"
    VIEWER = "Viewer"
    UNKNOWN_ROLE = "UnknownRole"


# Dead ends: the only way out is signing out
DEAD_ENDS = (ViewState.NO_SESSION, ViewState.UNKNOWN_ROLE)

_VIEW_BY_ROLE = {
    Role.ADMIN.value: ViewState.ADMIN,
    Role.MANAGER.value: ViewState.MANAGER,
    Role.ENGINEER.value: ViewState.ENGINEER,
    Role.VIEWER.value: ViewState.VIEWER,
}


def select_view(current_user: Optional[dict]) -> ViewState:
    """Pick the dashboard for the resolved current user."""
    if not current_user:
        return ViewState.NO_SESSION
    return _VIEW_BY_ROLE.get(current_user.get("role"), ViewState.UNKNOWN_ROLE)
