import logging
from typing import Optional
from redis.asyncio import Redis
from redis.exceptions import RedisError
from app.domain.errors import StoreError


logger = logging.getLogger('repositories')


class RedisPool:
    """
    Owns the Redis client of the document store. The client is built from a
    redis:// url when one is given, otherwise from host, port and db. Each
    repository call takes a single-connection client from it and releases it
    when the `async with` block ends.

    Usable as an async context manager that opens and closes the client.
    """
    def __init__(self, host: str = 'localhost', port: int = 6379, db: int = 0, password: Optional[str] = None,
                 url: Optional[str] = None, max_connections: Optional[int] = None):
        self.host = host
        self.port = port
        self.db = db
        self.password = password
        self.url = url
        self.max_connections = max_connections
        self.pool = None

    def _client(self) -> Redis:
        if self.url:
            return Redis.from_url(self.url, max_connections=self.max_connections)
        return Redis(host=self.host, port=self.port, db=self.db, password=self.password,
                     max_connections=self.max_connections)

    async def create_pool(self):
        client = self._client()
        try:
            await client.ping()
        except RedisError as e:
            await client.aclose()
            logger.error(f"Redis is not reachable: {e}")
            raise StoreError('connect', e) from e
        self.pool = client

    async def get_connection(self) -> Redis:
        if self.pool is None:
            raise StoreError('connect', RuntimeError('pool is not created'))
        return self.pool.client()

    async def close_pool(self):
        if self.pool is None:
            return
        await self.pool.aclose()
        self.pool = None

    async def __aenter__(self):
        await self.create_pool()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close_pool()
