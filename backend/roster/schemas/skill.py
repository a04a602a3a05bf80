from pydantic import BaseModel

class SkillIn(BaseModel):
    name: str

class SkillOut(BaseModel):
    id: str
    name: str
