import logging
from datetime import datetime, timezone
from typing import Optional
from pydantic_core import to_json, from_json
from redis.exceptions import RedisError
from infrastructure.redis_config import RedisPool
from app.domain.repositories_interfaces.document_store import DocumentStoreInterface, SERVER_TIMESTAMP, DELETE_FIELD
from app.domain.errors import StoreError, NotFound


logger = logging.getLogger('repositories')


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    # Fixed width UTC form, string order matches time order
    return value.astimezone(timezone.utc).isoformat(timespec='microseconds')


def resolve_placeholders(value, now: datetime):
    """
    Replaces every SERVER_TIMESTAMP placeholder in a record with the given time
    and every datetime with its fixed width ISO 8601 string.
    """
    if value is SERVER_TIMESTAMP:
        value = now
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, dict):
        return {key: resolve_placeholders(item, now) for key, item in value.items()}
    if isinstance(value, list):
        return [resolve_placeholders(item, now) for item in value]
    return value


def encode(record: dict) -> bytes:
    return to_json(resolve_placeholders(record, datetime.now(timezone.utc)))


class RedisDocumentStore(DocumentStoreInterface):
    """
    Keeps each document as one JSON string under '<collection>:doc:<id>' and
    the ids of a collection in the set '<collection>:index'.
    """
    def __init__(self, redis_pool: RedisPool):
        self.redis_pool = redis_pool

    @staticmethod
    def _key(collection: str, document_id: str) -> str:
        return f'{collection}:doc:{document_id}'

    @staticmethod
    def _index(collection: str) -> str:
        return f'{collection}:index'

    async def create(self, collection: str, document_id: str, record: dict) -> None:
        try:
            async with await self.redis_pool.get_connection() as conn:
                async with conn.pipeline(transaction=True) as pipe:
                    pipe.set(self._key(collection, document_id), encode(record), nx=True)
                    pipe.sadd(self._index(collection), document_id)
                    created, _ = await pipe.execute()
        except RedisError as e:
            raise StoreError('create', e) from e
        if not created:
            raise StoreError('create', KeyError(f'{collection}/{document_id} already exists'))
        logger.info(f"CREATED {collection}/{document_id}")

    async def replace(self, collection: str, document_id: str, record: dict) -> None:
        try:
            async with await self.redis_pool.get_connection() as conn:
                async with conn.pipeline(transaction=True) as pipe:
                    pipe.set(self._key(collection, document_id), encode(record))
                    pipe.sadd(self._index(collection), document_id)
                    await pipe.execute()
        except RedisError as e:
            raise StoreError('replace', e) from e
        logger.info(f"REPLACED {collection}/{document_id}")

    async def update(self, collection: str, document_id: str, fields: dict) -> None:
        key = self._key(collection, document_id)
        try:
            async with await self.redis_pool.get_connection() as conn:
                async with conn.pipeline(transaction=True) as pipe:
                    # Fails with WatchError if the document changes between read and write
                    await pipe.watch(key)
                    data = await pipe.get(key)
                    if data is None:
                        raise NotFound(document_id)
                    record = from_json(data)
                    for field, value in fields.items():
                        if value is DELETE_FIELD:
                            record.pop(field, None)
                        else:
                            record[field] = value
                    pipe.multi()
                    pipe.set(key, encode(record))
                    await pipe.execute()
        except RedisError as e:
            raise StoreError('update', e) from e
        logger.info(f"UPDATED {collection}/{document_id}: {', '.join(fields)}")

    async def get(self, collection: str, document_id: str) -> Optional[dict]:
        try:
            async with await self.redis_pool.get_connection() as conn:
                data = await conn.get(self._key(collection, document_id))
        except RedisError as e:
            raise StoreError('get', e) from e
        if data:
            return from_json(data)
        return None

    async def query(self, collection: str, order_by: Optional[str] = None,
                    where: Optional[dict] = None, descending: bool = False) -> list[tuple[str, dict]]:
        try:
            async with await self.redis_pool.get_connection() as conn:
                ids = sorted(
                    document_id.decode() if isinstance(document_id, bytes) else document_id
                    for document_id in await conn.smembers(self._index(collection))
                )
                if not ids:
                    return []
                values = await conn.mget([self._key(collection, document_id) for document_id in ids])
        except RedisError as e:
            raise StoreError('query', e) from e

        documents = [(document_id, from_json(data)) for document_id, data in zip(ids, values) if data]
        if where:
            documents = [
                (document_id, record) for document_id, record in documents
                if all(record.get(field) == value for field, value in where.items())
            ]
        if order_by:
            ordered = [document for document in documents if document[1].get(order_by) is not None]
            unordered = [document for document in documents if document[1].get(order_by) is None]
            ordered.sort(key=lambda document: document[1][order_by], reverse=descending)
            documents = ordered + unordered
        return documents

    async def delete(self, collection: str, document_id: str) -> None:
        try:
            async with await self.redis_pool.get_connection() as conn:
                async with conn.pipeline(transaction=True) as pipe:
                    pipe.delete(self._key(collection, document_id))
                    pipe.srem(self._index(collection), document_id)
                    await pipe.execute()
        except RedisError as e:
            raise StoreError('delete', e) from e
        logger.info(f"DELETED {collection}/{document_id}")
