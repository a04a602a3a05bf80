from pydantic import BaseModel
from typing import Optional


class Skill(BaseModel):
    id: Optional[str] = None
    name: str  # not required to be unique
