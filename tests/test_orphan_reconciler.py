import asyncio
import pytest
from app.domain.entities.answer_group import AnswerGroup
from app.domain.entities.answer import Answer
from app.domain.entities.attachment import ResolvedAttachment
from app.domain.errors import NotFound, NodeNotFound
from app.use_cases.questions.orphan_reconciler import OrphanReconciler, clear_attachment, superseded_urls
from app.use_cases.questions.sanitizer import sanitize
from fakes import make_question, BLOB_URL


def resolved(name):
    return ResolvedAttachment(url=f'{BLOB_URL}/{name}')


def question_with_images():
    return make_question(
        id='q1',
        image=resolved('q.png'),
        answer_groups=[
            AnswerGroup(id='g1', answers=[Answer(id='a1', text='Yes', image=resolved('a1.png')),
                                          Answer(id='a2', text='No')]),
            AnswerGroup(id='g2', answers=[Answer(id='a3', text='Maybe', image=resolved('a3.png'))]),
        ],
    )


async def store(document_store, question):
    await document_store.create('questions', question.id, sanitize(question, is_new=True))


async def test_delete_removes_blobs_then_document(document_store, blob_repo, events):
    await store(document_store, question_with_images())
    await OrphanReconciler(document_store, blob_repo).reconcile_delete('q1')

    assert document_store.calls[-1] == ('delete', 'questions', 'q1')
    assert events[-1] == ('document_delete', 'q1')
    assert sorted(path for kind, path in events[:-1] if kind == 'blob_delete') == ['a1.png', 'a3.png', 'q.png']
    assert len(events) == 4
    assert await document_store.get('questions', 'q1') is None


async def test_delete_of_missing_document(document_store, blob_repo):
    with pytest.raises(NotFound):
        await OrphanReconciler(document_store, blob_repo).reconcile_delete('missing-id')
    assert blob_repo.deletes == []


async def test_blob_failures_do_not_block_delete(document_store, blob_repo, caplog):
    blob_repo.fail_delete_on = lambda path: path == 'a1.png'
    await store(document_store, question_with_images())

    await OrphanReconciler(document_store, blob_repo).reconcile_delete('q1')

    assert len(blob_repo.deletes) == 3
    assert await document_store.get('questions', 'q1') is None
    assert 'a1.png' in caplog.text


async def test_cancelled_blob_delete_is_logged(document_store, blob_repo, caplog):
    blob_repo.fail_delete_on = lambda path: path == 'a3.png'
    blob_repo.delete_error = asyncio.CancelledError
    await store(document_store, question_with_images())

    await OrphanReconciler(document_store, blob_repo).reconcile_delete('q1')

    assert await document_store.get('questions', 'q1') is None
    assert f'{BLOB_URL}/a3.png' in caplog.text


async def test_foreign_urls_are_logged_and_skipped(document_store, blob_repo, caplog):
    await OrphanReconciler(document_store, blob_repo).discard_blobs(['https://elsewhere.test/x.png'])
    assert blob_repo.deletes == []
    assert 'elsewhere.test' in caplog.text


def test_clear_question_image():
    question = question_with_images()
    updated, url = clear_attachment(question)
    assert url == f'{BLOB_URL}/q.png'
    assert updated.image is None
    assert question.image_url == url
    assert updated.answer_groups[0].answers[0].image_url == f'{BLOB_URL}/a1.png'


def test_clear_answer_image():
    updated, url = clear_attachment(question_with_images(), 'a3')
    assert url == f'{BLOB_URL}/a3.png'
    assert updated.answer_groups[1].answers[0].image is None
    assert updated.image_url == f'{BLOB_URL}/q.png'


def test_clear_answer_without_image():
    _, url = clear_attachment(question_with_images(), 'a2')
    assert url is None


def test_clear_unknown_node():
    with pytest.raises(NodeNotFound):
        clear_attachment(question_with_images(), 'g1')


def test_superseded_urls():
    previous = question_with_images()
    current = previous.model_copy(deep=True)
    current.image = resolved('q-new.png')
    current.answer_groups = current.answer_groups[:1]

    assert superseded_urls(previous, current) == [f'{BLOB_URL}/q.png', f'{BLOB_URL}/a3.png']
    assert superseded_urls(previous, previous) == []
