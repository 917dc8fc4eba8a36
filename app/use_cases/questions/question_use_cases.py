import logging
from typing import Optional, Iterator
from uuid import uuid4
from app.domain.entities.question import Question
from app.domain.errors import NotFound
from app.domain.repositories_interfaces.document_store import DocumentStoreInterface, SERVER_TIMESTAMP, DELETE_FIELD
from app.domain.repositories_interfaces.blob_repo import BlobRepoInterface
from app.use_cases.questions.validator import validate
from app.use_cases.questions.attachment_resolver import AttachmentResolver
from app.use_cases.questions.sanitizer import sanitize, record_to_question
from app.use_cases.questions.orphan_reconciler import OrphanReconciler, clear_attachment, superseded_urls


logger = logging.getLogger('use_cases')


class QuestionUseCases:
    def __init__(self, document_store: DocumentStoreInterface, blob_repo: BlobRepoInterface,
                 collection: str = 'questions'):
        self.document_store = document_store
        self.blob_repo = blob_repo
        self.collection = collection
        self.attachment_resolver = AttachmentResolver(blob_repo)
        self.orphan_reconciler = OrphanReconciler(document_store, blob_repo, collection)

    async def save(self, question: Question) -> str:
        """
        Validates the question, uploads its pending attachments and writes it.

        A question without an id gets a new one before anything is uploaded so that
        blob paths are derived from the final document id. A question with an id replaces
        the stored document, and blobs that the new tree no longer references are deleted
        once the write has succeeded.

        :param question: The question tree to persist. It is not modified.
        :return: Id of the saved question.
        :raises QuestionValidationError: The tree is malformed. Nothing is uploaded or written.
        :raises UploadFailed: An attachment could not be uploaded. Nothing is written.
        :raises StoreError: The document store rejected the write.
        """
        validate(question)

        is_new = question.id is None
        previous = None
        if is_new:
            question = question.model_copy(update={'id': str(uuid4())})
        else:
            # Needed for createdAt and for the blobs this write supersedes
            previous_record = await self.document_store.get(self.collection, question.id)
            if previous_record is not None:
                previous = record_to_question(question.id, previous_record)
                if previous.created_at is not None:
                    # The stored creation time always wins over the incoming one
                    question = question.model_copy(update={'created_at': previous.created_at})

        logger.info("SAVE QUESTION", extra={'question': question.id})
        resolved = await self.attachment_resolver.resolve(question)
        record = sanitize(resolved, is_new=is_new)

        if is_new:
            await self.document_store.create(self.collection, resolved.id, record)
        else:
            await self.document_store.replace(self.collection, resolved.id, record)

        if previous is not None:
            await self.orphan_reconciler.discard_blobs(superseded_urls(previous, resolved), question_id=resolved.id)
        return resolved.id

    async def get(self, question_id: str) -> Question:
        """
        Retrieves a question by its id.

        :param question_id: Id of the question.
        :return: The question tree with resolved image URLs and timestamps.
        :raises NotFound: The question does not exist.
        """
        record = await self.document_store.get(self.collection, question_id)
        if record is None:
            raise NotFound(question_id)
        return record_to_question(question_id, record)

    async def list_questions(self, order_by: Optional[str] = 'createdAt', descending: bool = False) -> Iterator[Question]:
        """
        Lists every question of the collection as it is at call time.

        :param order_by: Record key to sort by, e.g. 'createdAt' or 'text'.
        :param descending: Reverse the order.
        :return: One-shot iterator over the questions.
        """
        records = await self.document_store.query(self.collection, order_by=order_by, descending=descending)
        return (record_to_question(question_id, record) for question_id, record in records)

    async def delete(self, question_id: str) -> None:
        """
        Deletes a question and, best-effort, every blob it references.

        :raises NotFound: The question does not exist.
        """
        logger.info("DELETE QUESTION", extra={'question': question_id})
        await self.orphan_reconciler.reconcile_delete(question_id)

    async def remove_attachment(self, question_id: str, node_id: Optional[str] = None) -> Question:
        """
        Clears the image of the question (node_id None) or of one of its answers
        and deletes the blob behind it.

        The document is updated first. The blob deletion is best-effort and its failure
        does not affect the returned question.

        :param question_id: Id of the question.
        :param node_id: Id of the answer whose image is removed, None for the question image.
        :return: The updated question. Its updatedAt is the one read before the write.
        :raises NotFound: The question does not exist.
        :raises NodeNotFound: No answer of the question has the given id.
        """
        question = await self.get(question_id)
        updated, url = clear_attachment(question, node_id)

        if node_id is None or node_id == question_id:
            fields = {'imageUrl': DELETE_FIELD}
        else:
            fields = {'answerGroups': sanitize(updated, is_new=False)['answerGroups']}
        fields['updatedAt'] = SERVER_TIMESTAMP
        await self.document_store.update(self.collection, question_id, fields)
        logger.info(f"ATTACHMENT REMOVED FROM NODE {node_id or question_id}", extra={'question': question_id})

        if url:
            await self.orphan_reconciler.discard_blobs([url], question_id=question_id)
        return updated
