from typing import Optional
from app.domain.entities.question import Question
from app.domain.entities.answer_group import AnswerGroup
from app.domain.entities.answer import Answer
from app.domain.entities.attachment import PendingAttachment, ResolvedAttachment
from app.domain.errors import UnresolvedAttachmentError
from app.domain.repositories_interfaces.document_store import SERVER_TIMESTAMP


"""
Conversion between the Question tree and the flat record kept by the document store:
{text, description?, required?, imageUrl?,
 answerGroups: [{id, name?, answers: [{id, text, isCorrect?, imageUrl?}]}],
 createdAt, updatedAt}
Optional keys are written only when the field is set.
"""


def _put_image(record: dict, image, node_id: Optional[str]) -> None:
    if isinstance(image, PendingAttachment):
        raise UnresolvedAttachmentError(node_id)
    if isinstance(image, ResolvedAttachment):
        record['imageUrl'] = image.url


def sanitize_answer(answer: Answer) -> dict:
    record = {'id': answer.id, 'text': answer.text}
    if answer.is_correct is not None:
        record['isCorrect'] = answer.is_correct
    _put_image(record, answer.image, answer.id)
    return record


def sanitize_group(group: AnswerGroup) -> dict:
    record = {'id': group.id}
    if group.name is not None:
        record['name'] = group.name
    record['answers'] = [sanitize_answer(answer) for answer in group.answers]
    return record


def sanitize(question: Question, is_new: bool) -> dict:
    """
    Builds the record written to the document store.

    :param question: Question whose attachments are all resolved.
    :param is_new: True when the question had no id before this write.
    :return: The persistable record. Timestamps are SERVER_TIMESTAMP placeholders,
    except an existing createdAt which is kept as is on updates.
    :raises UnresolvedAttachmentError: A node still carries a pending attachment.
    """
    record = {'text': question.text}
    if question.description is not None:
        record['description'] = question.description
    if question.required is not None:
        record['required'] = question.required
    _put_image(record, question.image, question.id)
    record['answerGroups'] = [sanitize_group(group) for group in question.answer_groups]

    record['updatedAt'] = SERVER_TIMESTAMP
    if is_new or question.created_at is None:
        record['createdAt'] = SERVER_TIMESTAMP
    else:
        record['createdAt'] = question.created_at
    return record


def _image(record: dict) -> Optional[dict]:
    url = record.get('imageUrl')
    return {'kind': 'resolved', 'url': url} if url else None


def record_to_question(question_id: str, record: dict) -> Question:
    """
    Rebuilds the Question tree from a stored record.
    """
    return Question.model_validate({
        'id': question_id,
        'text': record.get('text'),
        'description': record.get('description'),
        'required': record.get('required'),
        'image': _image(record),
        'answer_groups': [
            {
                'id': group['id'],
                'name': group.get('name'),
                'answers': [
                    {
                        'id': answer['id'],
                        'text': answer.get('text'),
                        'is_correct': answer.get('isCorrect'),
                        'image': _image(answer),
                    } for answer in group.get('answers', [])
                ],
            } for group in record.get('answerGroups', [])
        ],
        'created_at': record.get('createdAt'),
        'updated_at': record.get('updatedAt'),
    })
