from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class SessionPhase(str, Enum):
    """Lifecycle of a survey session."""

    LOADING = "loading"
    LOAD_ERROR = "load_error"
    ACTIVE = "active"
    FINISHED = "finished"


class SurveyCompletion(BaseModel):
    """What the thank-you screen shows once a survey is finished."""

    survey_id: str
    title: str = ""

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def thank_you_message(self) -> str:
        name = self.title or self.survey_id
        return f"Thank you for completing the survey \"{name}\"!"
