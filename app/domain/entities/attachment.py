from pydantic import BaseModel, Field
from typing import Optional, Literal, Union, Annotated


"""
Attachment Entity:
An image (or any binary payload) attached to a question or an answer.
It is either pending (raw bytes waiting for upload, never persisted)
or resolved (the URL returned by the blob store, the only form that is persisted).
1. PendingAttachment.data (bytes): Raw payload.
2. PendingAttachment.filename (str, None): Original file name, its extension is kept in the blob path.
3. PendingAttachment.content_type (str, None): MIME type passed to the blob store.
4. ResolvedAttachment.url (str): Retrieval URL of the uploaded blob.
"""
class PendingAttachment(BaseModel):
    kind: Literal['pending'] = 'pending'
    data: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None


class ResolvedAttachment(BaseModel):
    kind: Literal['resolved'] = 'resolved'
    url: str


Attachment = Annotated[Union[PendingAttachment, ResolvedAttachment], Field(discriminator='kind')]
