from __future__ import annotations


class AnswerError(ValueError):
    """Raised when the current selection cannot be turned into a response.

    ``message`` is meant to be shown to the respondent as is.
    """

    default_message = "This answer cannot be accepted."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NoAnswerError(AnswerError):
    default_message = "Please answer the question before continuing."


class AnswerTooLargeError(AnswerError):
    default_message = "Your answer is too long."


class InvalidSelectionError(AnswerError):
    default_message = "Please select one of the offered answers."


class AnswerOutOfRangeError(AnswerError):
    default_message = "Your answer is outside the allowed range."


class SkipNotAllowedError(AnswerError):
    default_message = "This question cannot be skipped."


class SurveySessionError(RuntimeError):
    """Base class for failures of a survey session."""


class LoadError(SurveySessionError):
    """The survey or the survey status could not be fetched."""


class SubmissionError(SurveySessionError):
    """A response could not be delivered to the survey service."""


__all__ = [
    "AnswerError",
    "NoAnswerError",
    "AnswerTooLargeError",
    "InvalidSelectionError",
    "AnswerOutOfRangeError",
    "SkipNotAllowedError",
    "SurveySessionError",
    "LoadError",
    "SubmissionError",
]
