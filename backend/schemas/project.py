"""Project-related Pydantic schemas"""

from pydantic import BaseModel
from typing import Optional


class ProjectCreateRequest(BaseModel):
    name: str = "Untitled Trial"


class ProjectInfoResponse(BaseModel):
    name: str
    has_design: bool
    total_units: Optional[int] = None
    seed: Optional[int] = None
