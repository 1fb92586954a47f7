from pydantic import BaseModel, Field
from typing import List, Optional


class CatalogExercise(BaseModel):
    id: str
    name: str
    body_part: Optional[str] = Field(None, alias="bodyPart")
    equipment: Optional[str] = None
    gif_url: Optional[str] = Field(None, alias="gifUrl")
    target: Optional[str] = None
    secondary_muscles: List[str] = Field(default_factory=list, alias="secondaryMuscles")
    instructions: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True
