from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Callable, List

import streamlit as st

from survey_client.models.response import AnswerSelection, ChecklistEntryResponse
from survey_client.models.session import SurveyCompletion
from survey_client.models.survey import (
    BooleanQuestion,
    ChecklistQuestion,
    ChoiceQuestion,
    NumberQuestion,
    Question,
    RangeQuestion,
    SurveySummary,
    TextQuestion,
)
from survey_client.services.errors import SurveySessionError

from . import state

PLACEHOLDER_OPTION = "Select an option..."
YES_OPTION = "Yes"
NO_OPTION = "No"
_NO_ACCESS_PATH = Path(__file__).parent / "assets" / "no_access.html"


@lru_cache(maxsize=1)
def _load_no_access_content() -> str:
    if not _NO_ACCESS_PATH.exists():
        return "<p>You do not have access to this survey.</p>"
    return _NO_ACCESS_PATH.read_text(encoding="utf-8")


def render_no_access() -> None:
    """Explain that the current user is not registered for surveys."""

    st.markdown(_load_no_access_content(), unsafe_allow_html=True)


def render_step_permission_prompt(on_decide: Callable[[bool], None]) -> None:
    """Ask once whether steps may be counted while taking surveys."""

    st.markdown("### Step counting")
    st.write(
        "We would like to count your steps while you take part. "
        "You can still answer surveys if you decline."
    )
    allow_col, deny_col = st.columns(2)
    with allow_col:
        st.button("OK", key="step_permission_allow", type="primary", on_click=on_decide, args=(True,))
    with deny_col:
        st.button("Cancel", key="step_permission_deny", on_click=on_decide, args=(False,))


def render_survey_list(surveys: List[SurveySummary], on_select: Callable[[str], None]) -> None:
    """List the available surveys with a button to open each one."""

    st.markdown("## Surveys")
    if not surveys:
        st.info("There are no surveys available right now.")
        return

    for summary in surveys:
        title_col, action_col = st.columns([3, 1], vertical_alignment="center")
        with title_col:
            st.markdown(f"**{summary.title or summary.id}**")
            if summary.finished:
                st.caption("Completed")
        with action_col:
            st.button(
                "Open",
                key=f"open_survey_{summary.id}",
                disabled=summary.finished,
                on_click=on_select,
                args=(summary.id,),
            )


def render_load_error(error: SurveySessionError | None, on_retry: Callable[[], None]) -> None:
    """Show why the survey could not be loaded with a retry button."""

    st.error(str(error) if error else "The survey could not be loaded.")
    st.button("Retry", key="retry_load_button", type="primary", on_click=on_retry)


def render_question_header(question: Question, title: str) -> None:
    """Render the survey title and the active question text."""

    if title:
        st.caption(title)
    st.markdown(f"### {question.question}")
    if question.optional:
        st.caption("This question is optional.")


def choice_label(question: ChoiceQuestion, index: int | None) -> str:
    """Label shown for a choice option; ``None`` is the unanswered placeholder."""

    if index is None:
        return PLACEHOLDER_OPTION
    return question.answers[index].text


def render_answer_widget(question: Question) -> AnswerSelection:
    """Render the widget for the question kind and return the current selection."""

    widget_key = f"{state.RESPONSE_WIDGET_PREFIX}{question.id}"

    match question:
        case BooleanQuestion():
            selection = st.radio(
                "Select an answer",
                options=[PLACEHOLDER_OPTION, YES_OPTION, NO_OPTION],
                key=widget_key,
            )
            if selection == PLACEHOLDER_OPTION:
                return AnswerSelection()
            return AnswerSelection(selected_bool=selection == YES_OPTION)

        case ChoiceQuestion():
            indices = list(range(len(question.answers)))
            if question.multiple:
                chosen = st.multiselect(
                    "Select all that apply",
                    options=indices,
                    format_func=lambda index: choice_label(question, index),
                    key=widget_key,
                )
                return AnswerSelection(selected_choice=list(chosen))
            selection = st.radio(
                "Select an answer",
                options=[None, *indices],
                format_func=lambda index: choice_label(question, index),
                key=widget_key,
            )
            if selection is None:
                return AnswerSelection()
            return AnswerSelection(selected_choice=[selection])

        case TextQuestion():
            if question.multiline:
                text = st.text_area("Your answer", key=widget_key, placeholder="Type your answer here...")
            else:
                text = st.text_input("Your answer", key=widget_key, placeholder="Type your answer here...")
            st.caption(f"{len(text or '')}/{question.length} characters")
            cleaned = (text or "").strip()
            return AnswerSelection(selected_text=cleaned or None)

        case ChecklistQuestion():
            entries: List[ChecklistEntryResponse] = []
            for entry in question.entries:
                checked = st.checkbox(entry.text, value=entry.default_answer, key=f"{widget_key}_{entry.id}")
                entries.append(ChecklistEntryResponse(checklist_entry_id=entry.id, answer=checked))
            return AnswerSelection(selected_checklist=entries)

        case RangeQuestion():
            default = question.default_value if question.default_value is not None else question.min_value
            value = st.slider(
                "Your answer",
                min_value=float(question.min_value),
                max_value=float(question.max_value),
                value=float(default),
                key=widget_key,
            )
            if question.min_text or question.max_text:
                low_col, high_col = st.columns(2)
                low_col.caption(question.min_text or "")
                high_col.markdown(
                    f"<div style='text-align: right'><small>{question.max_text or ''}</small></div>",
                    unsafe_allow_html=True,
                )
            return AnswerSelection(selected_range=value)

        case NumberQuestion():
            value = st.number_input(
                "Your answer",
                min_value=question.min_value,
                max_value=question.max_value,
                value=None,
                key=widget_key,
            )
            return AnswerSelection(selected_number=value)

    return AnswerSelection()


def render_answer_message() -> None:
    """Show the inline message left by the last rejected answer."""

    message = state.get_answer_message()
    if message:
        st.warning(message)


def render_completion(completion: SurveyCompletion, on_continue: Callable[[], None]) -> None:
    """Display the thank-you screen shown once a survey is finished."""

    st.success(completion.thank_you_message)
    st.button("Continue", key="finish_survey_continue", type="primary", on_click=on_continue)
