from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date as CalendarDate
from roster.models.user import Role

class UserCreate(BaseModel):
    name: str
    email: str
    role: Role = Role.ENGINEER  # default role offered by the admin form
    managerId: Optional[str] = None
    workingHours: str = ""
    shiftPattern: str = ""
    vacationDates: List[CalendarDate] = []
    skills: List[str] = []
    srThreshold: int = Field(0, ge=0)
    currentSrCount: int = Field(0, ge=0)

class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[Role] = None
    managerId: Optional[str] = None
    workingHours: Optional[str] = None
    shiftPattern: Optional[str] = None
    vacationDates: Optional[List[CalendarDate]] = None
    skills: Optional[List[str]] = None
    srThreshold: Optional[int] = Field(None, ge=0)
    currentSrCount: Optional[int] = Field(None, ge=0)

class UserOut(BaseModel):
    id: str
    name: str = ""
    email: str = ""
    role: Optional[str] = None  # whatever the record holds; routing decides what it means
    managerId: Optional[str] = None
    workingHours: str = ""
    shiftPattern: str = ""
    vacationDates: List[str] = []
    skills: List[str] = []
    srThreshold: int = 0
    currentSrCount: int = 0

    # Stored records are not validated, so nulls fall back to the field defaults
    @field_validator("name", "email", "workingHours", "shiftPattern", mode="before")
    @classmethod
    def null_text(cls, v):
        return "" if v is None else v

    @field_validator("vacationDates", "skills", mode="before")
    @classmethod
    def null_list(cls, v):
        return [] if v is None else v

    @field_validator("srThreshold", "currentSrCount", mode="before")
    @classmethod
    def null_count(cls, v):
        return 0 if v is None else v

class SRAssign(BaseModel):
    force: bool = False  # override the threshold without asking

class Confirmation(BaseModel):
    confirm: bool = False

class VacationChange(BaseModel):
    date: CalendarDate  # ISO calendar date
    confirm: bool = False
