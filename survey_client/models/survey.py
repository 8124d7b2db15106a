from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class Answer(BaseModel):
    """A selectable option of a choice question."""

    id: int
    text: str
    next_question_id: int | None = None

    model_config = {"extra": "forbid", "frozen": True}


class ChecklistEntry(BaseModel):
    """A single yes/no line of a checklist question."""

    id: int
    text: str
    default_answer: bool = False

    model_config = {"extra": "forbid", "frozen": True}


class _QuestionBase(BaseModel):
    id: int
    question: str
    optional: bool = False
    next_question_id: int | None = None

    model_config = {"extra": "forbid", "frozen": True}

    def branch_targets(self) -> List[int]:
        """Return every question id this question may point to."""

        return [self.next_question_id] if self.next_question_id is not None else []


class BooleanQuestion(_QuestionBase):
    """Yes/no question, optionally branching on the answer."""

    type: Literal["boolean"] = Field(default="boolean", frozen=True)
    true_next_question_id: int | None = None
    false_next_question_id: int | None = None

    def branch_targets(self) -> List[int]:
        targets = super().branch_targets()
        for target in (self.true_next_question_id, self.false_next_question_id):
            if target is not None:
                targets.append(target)
        return targets


class ChoiceQuestion(_QuestionBase):
    """Single or multiple choice between predefined answers."""

    type: Literal["choice"] = Field(default="choice", frozen=True)
    answers: List[Answer]
    multiple: bool = False

    @field_validator("answers")
    @classmethod
    def _ensure_answers(cls, value: List[Answer]) -> List[Answer]:
        if not value:
            raise ValueError("choice questions must define at least one answer")
        ids = [answer.id for answer in value]
        if len(set(ids)) != len(ids):
            raise ValueError("answer ids must be unique within a question")
        return value

    def branch_targets(self) -> List[int]:
        targets = super().branch_targets()
        targets.extend(answer.next_question_id for answer in self.answers if answer.next_question_id is not None)
        return targets


class TextQuestion(_QuestionBase):
    """Free text question with a maximum answer length."""

    type: Literal["text"] = Field(default="text", frozen=True)
    length: int = Field(default=255, gt=0)
    multiline: bool = False


class ChecklistQuestion(_QuestionBase):
    """A list of entries, each answered with yes or no."""

    type: Literal["checklist"] = Field(default="checklist", frozen=True)
    entries: List[ChecklistEntry] = Field(default_factory=list)


class RangeQuestion(_QuestionBase):
    """Slider between two bounds."""

    type: Literal["range"] = Field(default="range", frozen=True)
    min_value: float
    max_value: float
    min_text: str | None = None
    max_text: str | None = None
    default_value: float | None = None

    @model_validator(mode="after")
    def _ensure_bounds(self) -> "RangeQuestion":
        if self.min_value >= self.max_value:
            raise ValueError("min_value must be lower than max_value")
        if self.default_value is not None and not self.min_value <= self.default_value <= self.max_value:
            raise ValueError("default_value must lie between min_value and max_value")
        return self


class NumberQuestion(_QuestionBase):
    """Numeric input with optional bounds."""

    type: Literal["number"] = Field(default="number", frozen=True)
    min_value: float | None = None
    max_value: float | None = None

    @model_validator(mode="after")
    def _ensure_bounds(self) -> "NumberQuestion":
        if self.min_value is not None and self.max_value is not None and self.min_value > self.max_value:
            raise ValueError("min_value must not exceed max_value")
        return self


Question = Annotated[
    Union[BooleanQuestion, ChoiceQuestion, TextQuestion, ChecklistQuestion, RangeQuestion, NumberQuestion],
    Field(discriminator="type"),
]


class Survey(BaseModel):
    """A survey definition: questions reachable from a start question."""

    id: str
    title: str = ""
    questions: List[Question] = Field(default_factory=list)
    first_question_id: int | None = None

    model_config = {"extra": "forbid", "frozen": True}

    @model_validator(mode="after")
    def _ensure_consistent(self) -> "Survey":
        ids = [question.id for question in self.questions]
        if len(set(ids)) != len(ids):
            raise ValueError("question ids must be unique within a survey")

        known = set(ids)
        if self.first_question_id is not None and self.first_question_id not in known:
            raise ValueError(f"first_question_id {self.first_question_id} does not match any question")

        for question in self.questions:
            for target in question.branch_targets():
                if target not in known:
                    raise ValueError(f"question {question.id} points to unknown question {target}")

        return self

    @property
    def start_question_id(self) -> int | None:
        """Return the id traversal starts from when no progress exists."""

        if self.first_question_id is not None:
            return self.first_question_id
        if not self.questions:
            return None
        return self.questions[0].id

    def _index(self) -> Dict[int, int]:
        return {question.id: position for position, question in enumerate(self.questions)}

    def question(self, question_id: int) -> Question:
        """Return the question with the given id."""

        position = self._index().get(question_id)
        if position is None:
            raise KeyError(f"Unknown question id: {question_id}")
        return self.questions[position]

    def has_question(self, question_id: int) -> bool:
        return question_id in self._index()

    def follower(self, question_id: int) -> Question | None:
        """Return the question listed right after ``question_id``, if any."""

        position = self._index().get(question_id)
        if position is None:
            raise KeyError(f"Unknown question id: {question_id}")
        if position + 1 >= len(self.questions):
            return None
        return self.questions[position + 1]


class SurveyStatus(BaseModel):
    """Per-user progress through a survey, issued by the survey service."""

    survey_id: str
    title: str = ""
    token: str
    next_question_id: int | None = None

    model_config = {"extra": "forbid"}


class SurveySummary(BaseModel):
    """Entry of the survey list screen."""

    id: str
    title: str = ""
    finished: bool = False

    model_config = {"extra": "forbid"}
