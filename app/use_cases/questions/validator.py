from typing import Optional
from app.domain.entities.question import Question
from app.domain.errors import MissingText, EmptyGroupSet, EmptyAnswerSet, MissingAnswerText


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def validate(question: Question) -> None:
    """
    Checks the shape of the question tree before anything is uploaded or written.

    :param question: The question to check.
    :raises MissingText: The question text is absent or blank.
    :raises EmptyGroupSet: The question has no answer groups.
    :raises EmptyAnswerSet: An answer group has no answers.
    :raises MissingAnswerText: An answer text is absent or blank.
    """
    if is_blank(question.text):
        raise MissingText()
    if not question.answer_groups:
        raise EmptyGroupSet()
    for group in question.answer_groups:
        if not group.answers:
            raise EmptyAnswerSet(group.id)
        for answer in group.answers:
            if is_blank(answer.text):
                raise MissingAnswerText(group.id, answer.id)
