import os


REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')
REDIS_PORT = int(os.getenv('REDIS_PORT', '6379'))
REDIS_DB = int(os.getenv('REDIS_DB', '0'))
REDIS_PASSWORD = os.getenv('REDIS_PASSWORD')
# Takes precedence over host, port and db when set
REDIS_URL = os.getenv('REDIS_URL')
REDIS_MAX_CONNECTIONS = int(os.getenv('REDIS_MAX_CONNECTIONS', '20'))

QUESTIONS_COLLECTION = os.getenv('QUESTIONS_COLLECTION', 'questions')

# 's3' or 'local'
BLOB_BACKEND = os.getenv('BLOB_BACKEND', 's3')

S3_BUCKET = os.getenv('S3_BUCKET')
S3_PUBLIC_URL = os.getenv('S3_PUBLIC_URL')
S3_ENDPOINT_URL = os.getenv('S3_ENDPOINT_URL')
S3_REGION = os.getenv('S3_REGION')

LOCAL_BLOB_DIR = os.getenv('LOCAL_BLOB_DIR', 'blobs')
LOCAL_BLOB_URL = os.getenv('LOCAL_BLOB_URL', 'http://localhost:8000/blobs')

LOG_FILE = os.getenv('LOG_FILE', 'question_store.log')
