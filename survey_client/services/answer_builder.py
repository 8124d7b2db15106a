from __future__ import annotations

from typing import List, assert_never

from survey_client.models.response import AnswerSelection, SurveyResponse
from survey_client.models.survey import (
    BooleanQuestion,
    ChecklistQuestion,
    ChoiceQuestion,
    NumberQuestion,
    Question,
    RangeQuestion,
    TextQuestion,
)

from .errors import (
    AnswerOutOfRangeError,
    AnswerTooLargeError,
    InvalidSelectionError,
    NoAnswerError,
    SkipNotAllowedError,
)


class AnswerBuilder:
    """Turn the raw widget selection for a question into a ``SurveyResponse``."""

    def build(self, question: Question, selection: AnswerSelection, token: str) -> SurveyResponse:
        """Validate ``selection`` against ``question`` and return the response to submit."""

        match question:
            case BooleanQuestion():
                if selection.selected_bool is None:
                    raise NoAnswerError()
                return SurveyResponse(
                    question_id=question.id,
                    survey_token=token,
                    bool_answer=selection.selected_bool,
                )
            case ChoiceQuestion():
                return SurveyResponse(
                    question_id=question.id,
                    survey_token=token,
                    answer_ids=self._choice_ids(question, selection.selected_choice),
                )
            case TextQuestion():
                text = selection.selected_text
                if text is None:
                    raise NoAnswerError()
                if len(text) > question.length:
                    raise AnswerTooLargeError(f"Your answer is too long, at most {question.length} characters are allowed.")
                return SurveyResponse(
                    question_id=question.id,
                    survey_token=token,
                    text_answer=text,
                )
            case ChecklistQuestion():
                if not selection.selected_checklist:
                    raise NoAnswerError()
                return SurveyResponse(
                    question_id=question.id,
                    survey_token=token,
                    checklist_answer=list(selection.selected_checklist),
                )
            case RangeQuestion():
                value = selection.selected_range
                if value is None:
                    raise NoAnswerError()
                _check_bounds(value, question.min_value, question.max_value)
                return SurveyResponse(
                    question_id=question.id,
                    survey_token=token,
                    number_answer=value,
                )
            case NumberQuestion():
                value = selection.selected_number
                if value is None:
                    raise NoAnswerError()
                _check_bounds(value, question.min_value, question.max_value)
                return SurveyResponse(
                    question_id=question.id,
                    survey_token=token,
                    number_answer=value,
                )
            case _:
                assert_never(question)

    def skip(self, question: Question, token: str) -> SurveyResponse:
        """Return a skipped response; only optional questions may be skipped."""

        if not question.optional:
            raise SkipNotAllowedError()
        return SurveyResponse(question_id=question.id, survey_token=token, skipped=True)

    @staticmethod
    def _choice_ids(question: ChoiceQuestion, indices: List[int]) -> List[int]:
        if not indices:
            raise NoAnswerError()
        if not question.multiple and len(indices) > 1:
            raise InvalidSelectionError("Please select only one answer.")

        answer_ids: List[int] = []
        for index in indices:
            if not 0 <= index < len(question.answers):
                raise InvalidSelectionError()
            answer_ids.append(question.answers[index].id)
        return answer_ids


def _check_bounds(value: float, minimum: float | None, maximum: float | None) -> None:
    if minimum is not None and value < minimum:
        raise AnswerOutOfRangeError(f"Your answer must be at least {minimum:g}.")
    if maximum is not None and value > maximum:
        raise AnswerOutOfRangeError(f"Your answer must be at most {maximum:g}.")
