from __future__ import annotations

from typing import Optional

import streamlit as st

from survey_client.services.survey_session import SurveySession

SESSION_KEY = "survey_session"
SELECTED_SURVEY_KEY = "selected_survey_id"
STEP_PERMISSION_KEY = "step_permission"
ANSWER_MESSAGE_KEY = "answer_message"
RESPONSE_WIDGET_PREFIX = "response_"


def reset() -> None:
    """Reset all survey-related session state values."""

    clear_session()
    st.session_state[SELECTED_SURVEY_KEY] = None
    st.session_state[ANSWER_MESSAGE_KEY] = None


def ensure_defaults(default_survey_id: Optional[str] = None) -> None:
    """Ensure the expected session state keys exist with sensible defaults."""

    st.session_state.setdefault(SESSION_KEY, None)
    st.session_state.setdefault(SELECTED_SURVEY_KEY, default_survey_id)
    st.session_state.setdefault(STEP_PERMISSION_KEY, None)
    st.session_state.setdefault(ANSWER_MESSAGE_KEY, None)


def get_session() -> Optional[SurveySession]:
    """Return the survey session of this browser tab, if one was started."""

    return st.session_state.get(SESSION_KEY)


def set_session(session: SurveySession) -> None:
    """Replace the active survey session, closing the previous one."""

    previous = get_session()
    if previous is not None and previous is not session:
        previous.close()
    st.session_state[SESSION_KEY] = session


def clear_session() -> None:
    """Close and forget the active survey session."""

    session = get_session()
    if session is not None:
        session.close()
    st.session_state[SESSION_KEY] = None
    clear_answer_message()
    clear_response_widgets()


def get_selected_survey_id() -> Optional[str]:
    return st.session_state.get(SELECTED_SURVEY_KEY)


def set_selected_survey_id(survey_id: Optional[str]) -> None:
    st.session_state[SELECTED_SURVEY_KEY] = survey_id


def get_step_permission() -> Optional[bool]:
    """Return the step counting permission, ``None`` while not yet asked."""

    return st.session_state.get(STEP_PERMISSION_KEY)


def set_step_permission(granted: bool) -> None:
    st.session_state[STEP_PERMISSION_KEY] = bool(granted)


def get_answer_message() -> Optional[str]:
    """Return the inline message shown under the current question."""

    return st.session_state.get(ANSWER_MESSAGE_KEY)


def set_answer_message(message: str) -> None:
    st.session_state[ANSWER_MESSAGE_KEY] = message


def clear_answer_message() -> None:
    st.session_state[ANSWER_MESSAGE_KEY] = None


def clear_response_widgets() -> None:
    """Forget the values of all answer widgets so the next question starts empty."""

    for key in [name for name in st.session_state.keys() if str(name).startswith(RESPONSE_WIDGET_PREFIX)]:
        del st.session_state[key]
