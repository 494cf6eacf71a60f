"""Error types raised by the question pipeline.

Each error carries the HTTP status a web layer should answer with.
"""


class QuestionAnalyzerError(Exception):
    """Base class for all pipeline errors."""

    status_code = 500


class InvalidQuestionError(QuestionAnalyzerError):
    """The question text is missing or blank."""

    status_code = 400


class ChapterNotFoundError(QuestionAnalyzerError):
    """An explicitly requested chapter has no record."""

    status_code = 404

    def __init__(self, number: int):
        super().__init__(f"Chapter {number} does not exist")
        self.number = number


class StorageUnavailableError(QuestionAnalyzerError):
    """A catalog or event store call failed."""

    status_code = 500
