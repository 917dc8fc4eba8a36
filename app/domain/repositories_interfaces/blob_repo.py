from abc import ABC, abstractmethod
from typing import Optional


class BlobRepoInterface(ABC):
    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        """
        Stores the payload under the given path.

        :param path: Storage path (object key) of the blob.
        :param data: Raw payload.
        :param content_type: Optional MIME type of the payload.
        :return: Stable retrieval URL of the stored blob.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, path: str) -> None:
        """
        Deletes the blob. Deleting a missing blob is not an error.
        """
        raise NotImplementedError

    @abstractmethod
    def path_for_url(self, url: str) -> str:
        """
        Maps a URL returned by upload back to its storage path.
        Raises ValueError for URLs that this store did not produce.
        """
        raise NotImplementedError
