from abc import ABC, abstractmethod
from typing import Optional


class ServerTimestamp:
    """Placeholder that the document store replaces with its own clock on write."""

    def __repr__(self):
        return 'SERVER_TIMESTAMP'


SERVER_TIMESTAMP = ServerTimestamp()


class DeleteField:
    """Placeholder that removes a key from a document when passed to update."""

    def __repr__(self):
        return 'DELETE_FIELD'


DELETE_FIELD = DeleteField()


class DocumentStoreInterface(ABC):
    @abstractmethod
    async def create(self, collection: str, document_id: str, record: dict) -> None:
        """
        Writes a new document. Fails with StoreError if the id is already taken.

        :param collection: Name of the collection.
        :param document_id: Identifier of the document.
        :param record: Flat mapping of string keys to scalars, mappings and lists.
        """
        raise NotImplementedError

    @abstractmethod
    async def replace(self, collection: str, document_id: str, record: dict) -> None:
        """
        Writes the whole document, creating it if needed.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(self, collection: str, document_id: str, fields: dict) -> None:
        """
        Merges the given top-level fields into an existing document.
        A DELETE_FIELD value removes the key.
        Fails with NotFound if the document is absent.
        """
        raise NotImplementedError

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Optional[dict]:
        raise NotImplementedError

    @abstractmethod
    async def query(self, collection: str, order_by: Optional[str] = None,
                    where: Optional[dict] = None, descending: bool = False) -> list[tuple[str, dict]]:
        """
        Lists the documents of a collection.

        :param collection: Name of the collection.
        :param order_by: Record key to sort by. Documents without the key come last.
        :param where: Equality filter on top-level record keys.
        :param descending: Reverse the sort order.
        :return: List of (document id, record) pairs.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> None:
        raise NotImplementedError
