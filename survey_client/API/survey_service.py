from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from survey_client.models.response import SurveyResponse
from survey_client.models.survey import Question, Survey, SurveyStatus, SurveySummary


class SurveyServiceError(RuntimeError):
    """Raised when the survey service fails to complete a request."""


class UnknownSurveyError(SurveyServiceError):
    """Raised when a survey id is not known to the service."""


class StaleTokenError(SurveyServiceError):
    """Raised when an answer carries a token the service no longer accepts."""


@runtime_checkable
class SurveyService(Protocol):
    """Remote source of survey definitions and sink for answers."""

    def list_surveys(self) -> List[SurveySummary]:
        """Return the surveys available to the current user."""

    def get_survey_status(self, survey_id: str) -> SurveyStatus:
        """Return the user's progress for a survey."""

    def get_survey(self, survey_id: str) -> Survey:
        """Return the survey definition."""

    def answer(self, status: SurveyStatus, response: SurveyResponse, next_question: Question | None) -> SurveyStatus:
        """Record a response and return the advanced status."""
