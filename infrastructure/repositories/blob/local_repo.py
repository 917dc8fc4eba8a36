import logging
import os
from typing import Optional
import aiofiles
import aiofiles.os
from app.domain.repositories_interfaces.blob_repo import BlobRepoInterface


logger = logging.getLogger('repositories')


class LocalBlobRepo(BlobRepoInterface):
    """
    Blob store on the local filesystem, for development and tests.
    Files are written under base_dir and served from base_url by whatever static server points there.
    """
    def __init__(self, base_dir: str, base_url: str):
        self.base_dir = os.path.abspath(base_dir)
        self.base_url = base_url.rstrip('/')

    def _file_path(self, path: str) -> str:
        file_path = os.path.abspath(os.path.join(self.base_dir, path))
        if not file_path.startswith(self.base_dir + os.sep):
            raise ValueError(f'{path} points outside of {self.base_dir}')
        return file_path

    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        file_path = self._file_path(path)
        await aiofiles.os.makedirs(os.path.dirname(file_path), exist_ok=True)
        async with aiofiles.open(file_path, 'wb') as f:
            await f.write(data)
        logger.info(f"STORED {path} ({len(data)} bytes)")
        return f'{self.base_url}/{path}'

    async def delete(self, path: str) -> None:
        try:
            await aiofiles.os.remove(self._file_path(path))
        except FileNotFoundError:
            return
        logger.info(f"REMOVED {path}")

    def path_for_url(self, url: str) -> str:
        prefix = self.base_url + '/'
        if not url.startswith(prefix):
            raise ValueError(f'{url} is not served from {self.base_url}')
        return url[len(prefix):]
