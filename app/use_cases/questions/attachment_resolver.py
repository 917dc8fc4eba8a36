import asyncio
import logging
import os
from typing import Optional, Union
from uuid import uuid4
from app.domain.entities.question import Question
from app.domain.entities.answer import Answer
from app.domain.entities.attachment import ResolvedAttachment
from app.domain.errors import UploadFailed
from app.domain.repositories_interfaces.blob_repo import BlobRepoInterface


logger = logging.getLogger('use_cases')

BLOB_ROOT = 'questions'


def blob_name(filename: Optional[str] = None) -> str:
    # Fresh name on every upload, the blob referenced by the stored document is never overwritten
    extension = os.path.splitext(filename)[1].lower() if filename else ''
    return uuid4().hex + extension


def question_image_path(document_id: str, filename: Optional[str] = None) -> str:
    return f'{BLOB_ROOT}/{document_id}/image/{blob_name(filename)}'


def answer_image_path(document_id: str, group_id: str, answer_id: str, filename: Optional[str] = None) -> str:
    return f'{BLOB_ROOT}/{document_id}/groups/{group_id}/answers/{answer_id}/{blob_name(filename)}'


class AttachmentResolver:
    def __init__(self, blob_repo: BlobRepoInterface):
        self.blob_repo = blob_repo

    def pending_uploads(self, question: Question) -> list[tuple[str, Union[Question, Answer]]]:
        """
        Lists every node of the tree that carries a pending attachment together with
        the storage path of its blob. The question comes first, then answers in tree order.

        :param question: Question with an assigned id.
        :return: List of (blob path, node) pairs. Nodes are the objects of the given tree.
        """
        uploads = []
        if question.has_pending_image:
            uploads.append((question_image_path(question.id, question.image.filename), question))
        for group in question.answer_groups:
            for answer in group.answers:
                if answer.has_pending_image:
                    path = answer_image_path(question.id, group.id, answer.id, answer.image.filename)
                    uploads.append((path, answer))
        return uploads

    async def resolve(self, question: Question) -> Question:
        """
        Uploads every pending attachment of the tree concurrently and returns a copy of the
        question where each of them is replaced with the URL of the uploaded blob.

        All uploads are awaited even when one of them fails. Blobs that were uploaded
        before a failure are not deleted: the document is not written, so they are never referenced.

        :param question: Question with an assigned id. It is not modified.
        :return: The resolved copy, or the question itself when nothing is pending.
        :raises UploadFailed: For the first failed upload in tree order.
        """
        if not question.id:
            raise ValueError('Question id must be assigned before attachments are uploaded')

        working_copy = question.model_copy(deep=True)
        uploads = self.pending_uploads(working_copy)
        if not uploads:
            return question

        logger.info(f"UPLOAD {len(uploads)} ATTACHMENTS", extra={'question': question.id})
        results = await asyncio.gather(
            *(self._upload(path, node) for path, node in uploads),
            return_exceptions=True
        )
        for (path, _), result in zip(uploads, results):
            if isinstance(result, BaseException):
                logger.error(f"Upload to {path} failed: {result}", extra={'question': question.id})
                raise UploadFailed(path, result) from result
        return working_copy

    async def _upload(self, path: str, node: Union[Question, Answer]) -> str:
        attachment = node.image
        url = await self.blob_repo.upload(path, attachment.data, attachment.content_type)
        node.image = ResolvedAttachment(url=url)
        return url
