from pydantic import BaseModel, Field
from typing import Optional
from uuid import uuid4
from app.domain.entities.answer import Answer


"""
AnswerGroup Entity:
1. id (str): Unique identifier minted when the group is created.
2. name (str, None): Optional display name of the group.
3. answers (list[Answer]): Ordered answers of the group, order is preserved in storage.
"""
class AnswerGroup(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: Optional[str] = None
    answers: list[Answer] = Field(default_factory=list)
