from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field, model_validator

PayloadKind = Literal["bool_answer", "answer_ids", "text_answer", "checklist_answer", "number_answer"]

_PAYLOAD_FIELDS: tuple[PayloadKind, ...] = (
    "bool_answer",
    "answer_ids",
    "text_answer",
    "checklist_answer",
    "number_answer",
)


class ChecklistEntryResponse(BaseModel):
    """Answer given to one checklist entry."""

    checklist_entry_id: int
    answer: bool

    model_config = {"extra": "forbid", "frozen": True}


class SurveyResponse(BaseModel):
    """The answer to a single question as sent to the survey service.

    A response is either skipped and carries no payload, or carries exactly
    one payload field.
    """

    question_id: int
    survey_token: str
    skipped: bool = False
    bool_answer: bool | None = None
    answer_ids: List[int] | None = None
    text_answer: str | None = None
    checklist_answer: List[ChecklistEntryResponse] | None = None
    number_answer: float | None = None

    model_config = {"extra": "forbid", "frozen": True}

    @model_validator(mode="after")
    def _ensure_single_payload(self) -> "SurveyResponse":
        populated = [name for name in _PAYLOAD_FIELDS if getattr(self, name) is not None]
        if self.skipped and populated:
            raise ValueError("skipped responses must not carry an answer")
        if not self.skipped and len(populated) != 1:
            raise ValueError("a response must carry exactly one answer payload")
        return self

    @property
    def payload_kind(self) -> PayloadKind | None:
        """Name of the populated payload field, ``None`` when skipped."""

        for name in _PAYLOAD_FIELDS:
            if getattr(self, name) is not None:
                return name
        return None


class AnswerSelection(BaseModel):
    """Raw selection state collected by the answer widgets."""

    selected_bool: bool | None = None
    selected_choice: List[int] = Field(default_factory=list)
    selected_text: str | None = None
    selected_checklist: List[ChecklistEntryResponse] = Field(default_factory=list)
    selected_range: float | None = None
    selected_number: float | None = None

    model_config = {"extra": "forbid"}
