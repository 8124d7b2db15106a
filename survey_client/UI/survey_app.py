from __future__ import annotations

import streamlit as st

from survey_client.API.file_survey_service import FileSurveyService
from survey_client.API.survey_service import SurveyServiceError
from survey_client.UI import components, navigation, state
from survey_client.core.config import settings
from survey_client.core.log_config import configure_logging
from survey_client.models.session import SessionPhase
from survey_client.services.launcher import resolve_launch
from survey_client.services.steps import StepsManager
from survey_client.services.survey_session import SurveySession


@st.cache_resource
def _get_service() -> FileSurveyService:
    """Return the shared survey service."""

    return FileSurveyService(settings.storage.survey_data_path, settings.storage.survey_state_path)


@st.cache_resource
def _get_steps_manager() -> StepsManager:
    """Return the step counter owned by this app process."""

    return StepsManager()


def run_app() -> None:
    """Entry point for the Streamlit-based survey UI."""

    st.set_page_config(page_title="Survey", page_icon="📝", layout="centered")
    configure_logging(settings.log_level)

    state.ensure_defaults(settings.survey_id)

    if not settings.is_registered:
        components.render_no_access()
        return

    permission = state.get_step_permission()
    if settings.step_counter_enabled and permission is None:
        components.render_step_permission_prompt(on_decide=state.set_step_permission)
        return

    decision = resolve_launch(
        registered=settings.is_registered,
        permission_granted=bool(settings.step_counter_enabled and permission),
        steps=_get_steps_manager(),
        survey_id=state.get_selected_survey_id(),
    )

    if decision.screen == "survey_list" or decision.survey_id is None:
        _render_survey_list()
        return

    _render_survey(decision.survey_id)


def _render_survey_list() -> None:
    try:
        surveys = _get_service().list_surveys()
    except SurveyServiceError as exc:
        st.error(f"The survey list could not be loaded: {exc}")
        return
    components.render_survey_list(surveys, on_select=_open_survey)


def _render_survey(survey_id: str) -> None:
    session = state.get_session()
    if session is None or session.survey_id != survey_id or session.closed:
        session = SurveySession(survey_id, _get_service())
        state.set_session(session)

    if session.phase is SessionPhase.LOADING and not session.is_busy:
        with st.spinner("Loading survey..."):
            session.load()

    if session.phase is SessionPhase.LOAD_ERROR:
        components.render_load_error(session.error, on_retry=session.load)
        return

    if session.phase is SessionPhase.FINISHED and session.completion is not None:
        components.render_completion(session.completion, on_continue=_leave_survey)
        return

    question = session.current_question
    if question is None:
        st.info("Loading survey...")
        return

    components.render_question_header(question, session.title)
    selection = components.render_answer_widget(question)
    components.render_answer_message()
    navigation.render(session, selection)


def _open_survey(survey_id: str) -> None:
    state.clear_session()
    state.set_selected_survey_id(survey_id)


def _leave_survey() -> None:
    state.reset()
