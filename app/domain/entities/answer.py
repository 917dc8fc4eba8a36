from pydantic import BaseModel, Field
from typing import Optional
from uuid import uuid4
from app.domain.entities.attachment import Attachment, PendingAttachment, ResolvedAttachment


"""
Answer Entity:
1. id (str): Unique identifier minted when the answer is created. Stable across edits,
used to derive the blob path of the answer image.
2. text (str, None): The answer text. Must be non-blank to be saved.
3. is_correct (bool, None): Whether this answer is a correct one.
4. image (Attachment, None): Pending upload or resolved image URL.
"""
class Answer(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    text: Optional[str] = None
    is_correct: Optional[bool] = None
    image: Optional[Attachment] = None

    @property
    def image_url(self) -> Optional[str]:
        if isinstance(self.image, ResolvedAttachment):
            return self.image.url
        return None

    @property
    def has_pending_image(self) -> bool:
        return isinstance(self.image, PendingAttachment)
