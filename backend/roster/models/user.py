from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, List


class Role(str, Enum):
    ADMIN = "Admin"
    MANAGER = "Manager"
    ENGINEER = "Engineer"
    VIEWER = "Viewer"


ROLE_RANK = {
    Role.ADMIN.value: 0,
    Role.MANAGER.value: 1,
    Role.ENGINEER.value: 2,
    Role.VIEWER.value: 3,
}

# Records whose role is outside the enumeration sort after every known role
UNKNOWN_ROLE_RANK = len(ROLE_RANK)


class User(BaseModel):
    id: Optional[str] = None
    name: str = ""
    email: str = ""
    role: str = Role.VIEWER.value  # stored as text; unrecognised values are possible
    managerId: Optional[str] = None  # only meaningful for Engineer / Viewer
    workingHours: str = ""
    shiftPattern: str = ""
    vacationDates: List[str] = []  # ISO dates, ascending, no duplicates
    skills: List[str] = []  # Skill ids
    srThreshold: int = Field(0, ge=0)
    currentSrCount: int = Field(0, ge=0)


def default_profile(uid: str, email: Optional[str] = None) -> dict:
    """Profile synthesised for an identity that has no User record yet."""
    return User(
        name=email or f"Anonymous User {uid[:5]}",
        email=email or f"{uid}@example.com",
        role=Role.VIEWER.value,
        workingHours="9 AM - 5 PM",
        shiftPattern="Day Shift",
    ).model_dump(exclude={"id"})
