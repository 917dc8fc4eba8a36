import logging
from typing import Optional
import aioboto3
from botocore.exceptions import ClientError
from app.domain.repositories_interfaces.blob_repo import BlobRepoInterface


logger = logging.getLogger('repositories')


class S3BlobRepo(BlobRepoInterface):
    def __init__(self, bucket_name: str, public_url: str,
                 endpoint_url: Optional[str] = None, region_name: Optional[str] = None):
        self.s3_session = aioboto3.Session(region_name=region_name)
        self.bucket_name = bucket_name
        # Base URL the bucket is served from, e.g. https://<bucket>.s3.<region>.amazonaws.com or a CDN
        self.public_url = public_url.rstrip('/')
        self.endpoint_url = endpoint_url

    def _client(self):
        return self.s3_session.client('s3', endpoint_url=self.endpoint_url)

    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        extra = {'ContentType': content_type} if content_type else {}
        async with self._client() as s3_client:
            await s3_client.put_object(Bucket=self.bucket_name, Key=path, Body=data, **extra)
        logger.info(f"UPLOADED s3://{self.bucket_name}/{path} ({len(data)} bytes)")
        return f'{self.public_url}/{path}'

    async def delete(self, path: str) -> None:
        async with self._client() as s3_client:
            try:
                await s3_client.delete_object(Bucket=self.bucket_name, Key=path)
            except ClientError as e:
                # delete_object is idempotent on S3, some compatible stores answer NoSuchKey instead
                if e.response.get('Error', {}).get('Code') not in ('NoSuchKey', '404'):
                    raise
        logger.info(f"DELETED s3://{self.bucket_name}/{path}")

    def path_for_url(self, url: str) -> str:
        prefix = self.public_url + '/'
        if not url.startswith(prefix):
            raise ValueError(f'{url} is not served from {self.public_url}')
        return url[len(prefix):]
