from __future__ import annotations

from typing import Optional

from survey_client.models.response import SurveyResponse
from survey_client.models.survey import BooleanQuestion, ChoiceQuestion, Question, Survey


class QuestionIterator:
    """Walk a survey one question at a time.

    The first call to :meth:`next` returns the question at the start id. Every
    following call takes the answer given to the current question and moves to
    the question it leads to. Branch targets on the answer win over the
    question's own ``next_question_id``, which wins over list order.
    """

    def __init__(self, survey: Survey, start_question_id: int | None) -> None:
        if start_question_id is not None and not survey.has_question(start_question_id):
            raise KeyError(f"Unknown start question id: {start_question_id}")
        self._survey = survey
        self._start_question_id = start_question_id
        self._current: Optional[Question] = None
        self._started = False

    @property
    def survey(self) -> Survey:
        return self._survey

    @property
    def current(self) -> Question | None:
        """Return the question under the cursor."""

        return self._current

    def next(self, previous_answer: SurveyResponse | None) -> Question | None:
        """Advance the cursor and return the question to show, ``None`` once exhausted."""

        question = self.peek(previous_answer)
        self._started = True
        self._current = question
        return question

    def peek(self, previous_answer: SurveyResponse | None) -> Question | None:
        """Return what :meth:`next` would return without moving the cursor."""

        if not self._started:
            if previous_answer is not None:
                raise ValueError("the first call must not carry an answer")
            if self._start_question_id is None:
                return None
            return self._survey.question(self._start_question_id)

        if self._current is None:
            return None
        if previous_answer is None:
            raise ValueError(f"an answer to question {self._current.id} is required to advance")
        if previous_answer.question_id != self._current.id:
            raise ValueError(
                f"answer is for question {previous_answer.question_id}, current question is {self._current.id}"
            )

        target = self._branch_target(self._current, previous_answer)
        if target is not None:
            return self._survey.question(target)
        return self._survey.follower(self._current.id)

    def reset(self) -> None:
        """Move the cursor back before the start question."""

        self._current = None
        self._started = False

    @staticmethod
    def _branch_target(question: Question, answer: SurveyResponse) -> int | None:
        if answer.skipped:
            return question.next_question_id

        if isinstance(question, BooleanQuestion) and answer.bool_answer is not None:
            branch = question.true_next_question_id if answer.bool_answer else question.false_next_question_id
            if branch is not None:
                return branch

        if isinstance(question, ChoiceQuestion) and answer.answer_ids:
            selected = set(answer.answer_ids)
            for option in question.answers:
                if option.id in selected and option.next_question_id is not None:
                    return option.next_question_id

        return question.next_question_id
