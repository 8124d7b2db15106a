from __future__ import annotations

import logging

import streamlit as st

from survey_client.models.response import AnswerSelection
from survey_client.services.errors import AnswerError, SubmissionError
from survey_client.services.survey_session import SurveySession

from . import state

logger = logging.getLogger(__name__)


def render(session: SurveySession, selection: AnswerSelection) -> None:
    """Render the Next and Skip buttons for the current question."""

    question = session.current_question
    if question is None:
        return

    busy = session.is_busy

    def _go_next() -> None:
        try:
            accepted = session.answer(selection)
        except AnswerError as exc:
            state.set_answer_message(exc.message)
            return
        except SubmissionError as exc:
            state.set_answer_message(f"{exc} Please try again.")
            return
        if accepted:
            state.clear_answer_message()
            state.clear_response_widgets()
        else:
            logger.debug("Next ignored for question %s", question.id)

    def _skip() -> None:
        try:
            accepted = session.skip()
        except AnswerError as exc:
            state.set_answer_message(exc.message)
            return
        except SubmissionError as exc:
            state.set_answer_message(f"{exc} Please try again.")
            return
        if accepted:
            state.clear_answer_message()
            state.clear_response_widgets()

    next_col, skip_col = st.columns(2)
    with next_col:
        next_clicked = st.button("Next", key=f"next_{question.id}", type="primary", disabled=busy)
    skip_clicked = False
    if question.optional:
        with skip_col:
            skip_clicked = st.button("Skip", key=f"skip_{question.id}", disabled=busy)

    if next_clicked:
        _go_next()
        st.rerun()
    elif skip_clicked:
        _skip()
        st.rerun()
