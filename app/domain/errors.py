from typing import Optional


class QuestionStoreError(Exception):
    """Base class of every error raised by the question store."""


class QuestionValidationError(QuestionStoreError):
    """The question tree breaks a shape invariant. Raised before any I/O."""


class MissingText(QuestionValidationError):
    def __init__(self):
        super().__init__('Question text is required')


class EmptyGroupSet(QuestionValidationError):
    def __init__(self):
        super().__init__('Question must have at least one answer group')


class EmptyAnswerSet(QuestionValidationError):
    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f'Answer group {group_id} must have at least one answer')


class MissingAnswerText(QuestionValidationError):
    def __init__(self, group_id: str, answer_id: str):
        self.group_id = group_id
        self.answer_id = answer_id
        super().__init__(f'Answer {answer_id} in group {group_id} has no text')


class UploadFailed(QuestionStoreError):
    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f'Upload to {path} failed: {cause}')


class NotFound(QuestionStoreError):
    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f'Question {question_id} not found')


class StoreError(QuestionStoreError):
    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f'Document store {operation} failed: {cause}')


class UnresolvedAttachmentError(QuestionStoreError):
    def __init__(self, node_id: Optional[str]):
        self.node_id = node_id
        super().__init__(f'Node {node_id} still carries a pending attachment')


class NodeNotFound(QuestionStoreError):
    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f'Node {node_id} is not part of the question')
