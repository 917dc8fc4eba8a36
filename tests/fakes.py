import asyncio
from datetime import datetime, timezone
from typing import Optional
from app.domain.entities.question import Question
from app.domain.entities.answer_group import AnswerGroup
from app.domain.entities.answer import Answer
from app.domain.entities.attachment import PendingAttachment
from app.domain.errors import StoreError, NotFound
from app.domain.repositories_interfaces.document_store import DocumentStoreInterface, SERVER_TIMESTAMP, DELETE_FIELD
from app.domain.repositories_interfaces.blob_repo import BlobRepoInterface


BLOB_URL = 'https://blobs.test'


class InMemoryDocumentStore(DocumentStoreInterface):
    def __init__(self, events=None):
        self.collections = {}
        self.calls = []
        self.events = events if events is not None else []

    def _resolve(self, value):
        if value is SERVER_TIMESTAMP:
            return datetime.now(timezone.utc)
        if isinstance(value, dict):
            return {key: self._resolve(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._resolve(item) for item in value]
        return value

    async def create(self, collection, document_id, record):
        self.calls.append(('create', collection, document_id))
        documents = self.collections.setdefault(collection, {})
        if document_id in documents:
            raise StoreError('create', KeyError(document_id))
        documents[document_id] = self._resolve(record)

    async def replace(self, collection, document_id, record):
        self.calls.append(('replace', collection, document_id))
        self.collections.setdefault(collection, {})[document_id] = self._resolve(record)

    async def update(self, collection, document_id, fields):
        self.calls.append(('update', collection, document_id))
        record = self.collections.get(collection, {}).get(document_id)
        if record is None:
            raise NotFound(document_id)
        for field, value in fields.items():
            if value is DELETE_FIELD:
                record.pop(field, None)
            else:
                record[field] = self._resolve(value)

    async def get(self, collection, document_id):
        self.calls.append(('get', collection, document_id))
        return self.collections.get(collection, {}).get(document_id)

    async def query(self, collection, order_by=None, where=None, descending=False):
        self.calls.append(('query', collection, None))
        documents = list(self.collections.get(collection, {}).items())
        if order_by:
            documents.sort(key=lambda document: document[1][order_by], reverse=descending)
        return documents

    async def delete(self, collection, document_id):
        self.calls.append(('delete', collection, document_id))
        self.events.append(('document_delete', document_id))
        self.collections.get(collection, {}).pop(document_id, None)


class InMemoryBlobRepo(BlobRepoInterface):
    def __init__(self, events=None):
        self.blobs = {}
        self.uploads = []
        self.deletes = []
        self.fail_upload_on = None
        self.fail_delete_on = None
        self.delete_error = ConnectionError
        self.events = events if events is not None else []
        self.upload_delay = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        self.uploads.append(path)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.upload_delay)
            if self.fail_upload_on and self.fail_upload_on(path):
                raise ConnectionError(f'upload of {path} refused')
            self.blobs[path] = data
        finally:
            self.in_flight -= 1
        return f'{BLOB_URL}/{path}'

    async def delete(self, path: str) -> None:
        self.deletes.append(path)
        self.events.append(('blob_delete', path))
        if self.fail_delete_on and self.fail_delete_on(path):
            raise self.delete_error(f'delete of {path} refused')
        self.blobs.pop(path, None)

    def path_for_url(self, url: str) -> str:
        prefix = BLOB_URL + '/'
        if not url.startswith(prefix):
            raise ValueError(url)
        return url[len(prefix):]


def image(name: str = 'picture.png') -> PendingAttachment:
    return PendingAttachment(data=name.encode(), filename=name, content_type='image/png')


def make_question(**kwargs) -> Question:
    fields = {
        'text': 'Pick one',
        'answer_groups': [
            AnswerGroup(id='g1', answers=[Answer(id='a1', text='Yes'), Answer(id='a2', text='No')])
        ],
    }
    fields.update(kwargs)
    return Question(**fields)
