from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from survey_client.models.response import ChecklistEntryResponse, SurveyResponse
from survey_client.models.survey import (
    Answer,
    ChoiceQuestion,
    NumberQuestion,
    Question,
    RangeQuestion,
    Survey,
    TextQuestion,
)


def test_question_union_dispatches_on_type() -> None:
    adapter = TypeAdapter(Question)

    question = adapter.validate_python({"type": "text", "id": 1, "question": "Comments", "length": 20})

    assert isinstance(question, TextQuestion)
    assert question.length == 20


def test_unknown_question_type_is_rejected() -> None:
    with pytest.raises(ValidationError):
        TypeAdapter(Question).validate_python({"type": "slider", "id": 1, "question": "?"})


def test_choice_question_requires_answers() -> None:
    with pytest.raises(ValidationError):
        ChoiceQuestion(id=1, question="Pick", answers=[])


def test_range_bounds_must_be_ordered() -> None:
    with pytest.raises(ValidationError):
        RangeQuestion(id=1, question="Feel?", min_value=5, max_value=5)


def test_survey_rejects_duplicate_question_ids() -> None:
    with pytest.raises(ValidationError):
        Survey(id="dup", questions=[NumberQuestion(id=1, question="a"), NumberQuestion(id=1, question="b")])


def test_survey_rejects_dangling_pointers() -> None:
    with pytest.raises(ValidationError):
        Survey(
            id="dangling",
            questions=[
                ChoiceQuestion(id=1, question="Pick", answers=[Answer(id=10, text="A", next_question_id=7)]),
            ],
        )


def test_survey_start_defaults_to_first_listed_question() -> None:
    survey = Survey(id="s", questions=[NumberQuestion(id=4, question="a"), NumberQuestion(id=2, question="b")])

    assert survey.start_question_id == 4
    assert survey.follower(4).id == 2
    assert survey.follower(2) is None
    with pytest.raises(KeyError):
        survey.question(9)


def test_response_requires_exactly_one_payload() -> None:
    with pytest.raises(ValidationError):
        SurveyResponse(question_id=1, survey_token="t")
    with pytest.raises(ValidationError):
        SurveyResponse(question_id=1, survey_token="t", bool_answer=True, text_answer="yes")


def test_skipped_response_must_not_carry_payload() -> None:
    with pytest.raises(ValidationError):
        SurveyResponse(question_id=1, survey_token="t", skipped=True, number_answer=3)


def test_checklist_payload_kind() -> None:
    response = SurveyResponse(
        question_id=1,
        survey_token="t",
        checklist_answer=[ChecklistEntryResponse(checklist_entry_id=1, answer=True)],
    )

    assert response.payload_kind == "checklist_answer"
