import asyncio
import logging
from typing import Optional, Iterable
from app.domain.entities.question import Question
from app.domain.errors import NotFound, NodeNotFound
from app.domain.repositories_interfaces.document_store import DocumentStoreInterface
from app.domain.repositories_interfaces.blob_repo import BlobRepoInterface
from app.use_cases.questions.sanitizer import record_to_question


logger = logging.getLogger('use_cases')


def clear_attachment(question: Question, node_id: Optional[str] = None) -> tuple[Question, Optional[str]]:
    """
    Returns a copy of the question with the attachment of one node cleared.

    :param question: The question tree. It is not modified.
    :param node_id: Id of the answer to clear, None (or the question id) for the question itself.
    :return: The updated copy and the URL that is no longer referenced, if the node had one.
    :raises NodeNotFound: No answer of the tree has the given id.
    """
    updated = question.model_copy(deep=True)
    node = None
    if node_id is None or node_id == updated.id:
        node = updated
    else:
        for group in updated.answer_groups:
            for answer in group.answers:
                if answer.id == node_id:
                    node = answer
                    break
    if node is None:
        raise NodeNotFound(node_id)

    url = node.image_url
    node.image = None
    return updated, url


def superseded_urls(previous: Question, current: Question) -> list[str]:
    """
    URLs referenced by the previously stored tree that the current tree dropped,
    either because the image was replaced or cleared, or because its answer or group was removed.
    """
    kept = set(current.image_urls())
    return [url for url in previous.image_urls() if url not in kept]


class OrphanReconciler:
    def __init__(self, document_store: DocumentStoreInterface, blob_repo: BlobRepoInterface,
                 collection: str = 'questions'):
        self.document_store = document_store
        self.blob_repo = blob_repo
        self.collection = collection

    async def reconcile_delete(self, question_id: str) -> None:
        """
        Deletes a question together with every blob its stored tree references.

        Blobs are deleted first. A failed blob deletion is logged and does not stop
        the document from being deleted.

        :param question_id: Id of the question to delete.
        :raises NotFound: The question does not exist.
        """
        record = await self.document_store.get(self.collection, question_id)
        if record is None:
            raise NotFound(question_id)

        question = record_to_question(question_id, record)
        await self.discard_blobs(question.image_urls(), question_id=question_id)
        await self.document_store.delete(self.collection, question_id)
        logger.info("QUESTION DELETED", extra={'question': question_id})

    async def discard_blobs(self, urls: Iterable[str], question_id: Optional[str] = None) -> None:
        """
        Deletes the blobs behind the given URLs concurrently. Never raises on blob failures.
        """
        urls = list(urls)
        if not urls:
            return
        results = await asyncio.gather(*(self._discard(url) for url in urls), return_exceptions=True)
        for url, result in zip(urls, results):
            if isinstance(result, BaseException):
                logger.warning(f"Could not delete blob {url}: {result}",
                               exc_info=result, extra={'question': question_id or '-'})

    async def _discard(self, url: str) -> None:
        path = self.blob_repo.path_for_url(url)
        await self.blob_repo.delete(path)
