from infrastructure.redis_config import RedisPool
from infrastructure.repositories.question.redis_repo import RedisDocumentStore
from infrastructure.repositories.blob.s3_repo import S3BlobRepo
from infrastructure.repositories.blob.local_repo import LocalBlobRepo
from app.use_cases.questions.question_use_cases import QuestionUseCases
from config import main_config
from config.logging_config import configure_logging


# Repository service that holds the document store, the blob store and the pool they depend on.
class RepoService:
    def __init__(self, redis_pool, document_store, blob_repo, collection):
        self.redis_pool = redis_pool
        self.document_store = document_store
        self.blob_repo = blob_repo
        self.collection = collection

    def question_use_cases(self) -> QuestionUseCases:
        return QuestionUseCases(document_store=self.document_store, blob_repo=self.blob_repo,
                                collection=self.collection)

    async def close(self):
        await self.redis_pool.close_pool()


def create_blob_repo(backend: str):
    if backend == 's3':
        if not main_config.S3_BUCKET or not main_config.S3_PUBLIC_URL:
            raise ValueError('S3_BUCKET and S3_PUBLIC_URL must be set for the s3 blob backend')
        return S3BlobRepo(bucket_name=main_config.S3_BUCKET, public_url=main_config.S3_PUBLIC_URL,
                          endpoint_url=main_config.S3_ENDPOINT_URL, region_name=main_config.S3_REGION)
    if backend == 'local':
        return LocalBlobRepo(base_dir=main_config.LOCAL_BLOB_DIR, base_url=main_config.LOCAL_BLOB_URL)
    raise ValueError(f'Unknown blob backend: {backend}')


async def create_repo_service(setup_logging: bool = True) -> RepoService:
    if setup_logging:
        configure_logging()

    # Creating pool and repo instances from environment configuration
    redis_pool = RedisPool(host=main_config.REDIS_HOST, port=main_config.REDIS_PORT,
                           db=main_config.REDIS_DB, password=main_config.REDIS_PASSWORD,
                           url=main_config.REDIS_URL, max_connections=main_config.REDIS_MAX_CONNECTIONS)
    blob_repo = create_blob_repo(main_config.BLOB_BACKEND)
    await redis_pool.create_pool()
    return RepoService(
        redis_pool=redis_pool,
        document_store=RedisDocumentStore(redis_pool),
        blob_repo=blob_repo,
        collection=main_config.QUESTIONS_COLLECTION
    )
