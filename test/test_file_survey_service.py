from __future__ import annotations

import json
from pathlib import Path

import pytest

from survey_client.API.file_survey_service import FileSurveyService
from survey_client.API.survey_service import StaleTokenError, SurveyService, SurveyServiceError, UnknownSurveyError
from survey_client.core.config import settings
from survey_client.models.response import AnswerSelection, SurveyResponse
from survey_client.models.session import SessionPhase
from survey_client.models.survey import Survey
from survey_client.services.errors import SubmissionError
from survey_client.services.survey_session import SurveySession


def _build_service(tmp_path: Path, survey: Survey) -> FileSurveyService:
    definitions = tmp_path / "surveys.json"
    definitions.write_text(json.dumps({"surveys": [survey.model_dump(mode="json")]}), encoding="utf-8")
    return FileSurveyService(definitions, tmp_path / "state.json")


def test_service_satisfies_protocol(tmp_path: Path, vaccination_survey: Survey) -> None:
    assert isinstance(_build_service(tmp_path, vaccination_survey), SurveyService)


def test_definitions_round_trip_through_json(tmp_path: Path, vaccination_survey: Survey) -> None:
    service = _build_service(tmp_path, vaccination_survey)

    assert service.get_survey("vaccination") == vaccination_survey


def test_initial_status_starts_at_first_question(tmp_path: Path, vaccination_survey: Survey) -> None:
    service = _build_service(tmp_path, vaccination_survey)

    status = service.get_survey_status("vaccination")

    assert status.next_question_id == 1
    assert status.title == "Vaccination"
    assert status.token
    assert service.get_survey_status("vaccination") == status


def test_answer_advances_status_and_rotates_token(tmp_path: Path, vaccination_survey: Survey) -> None:
    service = _build_service(tmp_path, vaccination_survey)
    status = service.get_survey_status("vaccination")
    response = SurveyResponse(question_id=1, survey_token=status.token, bool_answer=True)

    updated = service.answer(status, response, vaccination_survey.question(2))

    assert updated.next_question_id == 2
    assert updated.token != status.token
    assert service.recorded_responses("vaccination") == [response]


def test_stale_token_is_rejected(tmp_path: Path, vaccination_survey: Survey) -> None:
    service = _build_service(tmp_path, vaccination_survey)
    status = service.get_survey_status("vaccination")
    response = SurveyResponse(question_id=1, survey_token=status.token, bool_answer=True)
    service.answer(status, response, vaccination_survey.question(2))

    with pytest.raises(StaleTokenError):
        service.answer(status, response, vaccination_survey.question(2))

    assert len(service.recorded_responses("vaccination")) == 1


def test_unknown_survey_is_rejected(tmp_path: Path, vaccination_survey: Survey) -> None:
    service = _build_service(tmp_path, vaccination_survey)

    with pytest.raises(UnknownSurveyError):
        service.get_survey("missing")


def test_invalid_definitions_raise_service_error(tmp_path: Path) -> None:
    definitions = tmp_path / "surveys.json"
    definitions.write_text(json.dumps({"surveys": [{"id": "broken", "questions": [{"type": "bogus", "id": 1}]}]}))
    service = FileSurveyService(definitions, tmp_path / "state.json")

    with pytest.raises(SurveyServiceError):
        service.list_surveys()


def test_progress_survives_a_new_service(tmp_path: Path, vaccination_survey: Survey) -> None:
    service = _build_service(tmp_path, vaccination_survey)
    session = SurveySession("vaccination", service)
    session.load()
    session.answer(AnswerSelection(selected_bool=True))

    resumed = SurveySession("vaccination", _build_service(tmp_path, vaccination_survey))
    resumed.load()

    assert resumed.current_question.id == 2


def test_finished_survey_is_listed_as_finished(tmp_path: Path, vaccination_survey: Survey) -> None:
    service = _build_service(tmp_path, vaccination_survey)
    session = SurveySession("vaccination", service)
    session.load()
    session.answer(AnswerSelection(selected_bool=False))
    session.skip()

    assert session.phase is SessionPhase.FINISHED
    assert [summary.finished for summary in service.list_surveys()] == [True]

    again = SurveySession("vaccination", service)
    again.load()
    assert again.phase is SessionPhase.FINISHED


def test_bundled_survey_definitions_load() -> None:
    service = FileSurveyService(settings.storage.survey_data_path, settings.storage.survey_state_path)

    surveys = service.list_surveys()

    assert [summary.id for summary in surveys] == ["daily-checkin"]
    assert len(service.get_survey("daily-checkin").questions) == 6


def test_missing_state_directory_is_a_retryable_load_error(tmp_path: Path, vaccination_survey: Survey) -> None:
    definitions = tmp_path / "surveys.json"
    definitions.write_text(json.dumps({"surveys": [vaccination_survey.model_dump(mode="json")]}), encoding="utf-8")
    state_dir = tmp_path / "state"
    session = SurveySession("vaccination", FileSurveyService(definitions, state_dir / "state.json"))

    session.load()

    assert session.phase is SessionPhase.LOAD_ERROR
    assert not session.is_busy

    state_dir.mkdir()
    session.load()

    assert session.phase is SessionPhase.ACTIVE
    assert session.current_question.id == 1


def test_failed_state_write_is_a_retryable_submission_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, vaccination_survey: Survey
) -> None:
    service = _build_service(tmp_path, vaccination_survey)
    session = SurveySession("vaccination", service)
    session.load()

    def _disk_full(self: Path, *args, **kwargs) -> int:
        raise OSError(28, "No space left on device")

    with monkeypatch.context() as patched:
        patched.setattr(Path, "write_text", _disk_full)
        with pytest.raises(SubmissionError):
            session.answer(AnswerSelection(selected_bool=True))

    assert not session.is_busy
    assert session.phase is SessionPhase.ACTIVE
    assert session.current_question.id == 1

    assert session.answer(AnswerSelection(selected_bool=True)) is True
    assert session.current_question.id == 2
    assert len(service.recorded_responses("vaccination")) == 1
