from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from app.domain.entities.attachment import Attachment, PendingAttachment, ResolvedAttachment
from app.domain.entities.answer_group import AnswerGroup


"""
Question Entity:
1. id (str, None): Document identifier. None until the question is saved for the first time.
2. text (str, None): The content of the question. Must be non-blank to be saved.
3. description (str, None): Additional context or instructions.
4. required (bool, None): Whether answering the question is mandatory.
5. image (Attachment, None): Pending upload or resolved image URL.
6. answer_groups (list[AnswerGroup]): Ordered groups of answers.
7. created_at, updated_at (datetime, None): Assigned by the document store on write.
"""
class Question(BaseModel):
    id: Optional[str] = None
    text: Optional[str] = None
    description: Optional[str] = None
    required: Optional[bool] = None
    image: Optional[Attachment] = None
    answer_groups: list[AnswerGroup] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def image_url(self) -> Optional[str]:
        if isinstance(self.image, ResolvedAttachment):
            return self.image.url
        return None

    @property
    def has_pending_image(self) -> bool:
        return isinstance(self.image, PendingAttachment)

    def image_urls(self) -> list[str]:
        """
        Collects every resolved image URL of the tree: the question first,
        then answers in group and answer order.
        """
        urls = [self.image_url] if self.image_url else []
        for group in self.answer_groups:
            urls.extend(answer.image_url for answer in group.answers if answer.image_url)
        return urls
