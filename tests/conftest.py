import pytest
from app.use_cases.questions.question_use_cases import QuestionUseCases
from fakes import InMemoryDocumentStore, InMemoryBlobRepo


@pytest.fixture
def events():
    return []


@pytest.fixture
def document_store(events):
    return InMemoryDocumentStore(events=events)


@pytest.fixture
def blob_repo(events):
    return InMemoryBlobRepo(events=events)


@pytest.fixture
def use_cases(document_store, blob_repo):
    return QuestionUseCases(document_store=document_store, blob_repo=blob_repo)
