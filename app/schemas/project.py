from pydantic import BaseModel
from typing import Optional


class Project(BaseModel):
    id: str
    name: str
    team_id: str  # the responsible manager's user id
    description: Optional[str] = None

    model_config = {
        "frozen": True
    }
