from __future__ import annotations

import json
import logging
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from survey_client.models.response import SurveyResponse
from survey_client.models.survey import Question, Survey, SurveyStatus, SurveySummary

from .survey_service import StaleTokenError, SurveyService, SurveyServiceError, UnknownSurveyError

logger = logging.getLogger(__name__)


class FileSurveyService(SurveyService):
    """Survey service backed by two JSON files.

    ``definitions_path`` holds the survey definitions under a ``"surveys"`` key
    and is only read. ``state_path`` keeps per-survey progress (token, next
    question, recorded responses) and is rewritten after every answer.
    """

    def __init__(self, definitions_path: Path, state_path: Path) -> None:
        self._definitions_path = Path(definitions_path)
        self._state_path = Path(state_path)
        self._lock = threading.Lock()
        self._surveys: Optional[Dict[str, Survey]] = None

    def list_surveys(self) -> List[SurveySummary]:
        with self._lock:
            surveys = self._surveys_unlocked()
            state = self._read_state_unlocked()
        return [
            SurveySummary(
                id=survey.id,
                title=survey.title,
                finished=bool(state.get(survey.id, {}).get("finished", False)),
            )
            for survey in surveys.values()
        ]

    def get_survey(self, survey_id: str) -> Survey:
        with self._lock:
            return self._survey_unlocked(survey_id)

    def get_survey_status(self, survey_id: str) -> SurveyStatus:
        with self._lock:
            survey = self._survey_unlocked(survey_id)
            state = self._read_state_unlocked()
            entry = state.get(survey_id)
            if entry is None:
                entry = {
                    "token": _new_token(),
                    "next_question_id": survey.start_question_id,
                    "finished": survey.start_question_id is None,
                    "responses": [],
                }
                state[survey_id] = entry
                self._write_state_unlocked(state)
                logger.info("Started progress for survey %s", survey_id)
        return _status_from_entry(survey, entry)

    def answer(self, status: SurveyStatus, response: SurveyResponse, next_question: Question | None) -> SurveyStatus:
        with self._lock:
            survey = self._survey_unlocked(status.survey_id)
            state = self._read_state_unlocked()
            entry = state.get(status.survey_id)
            if entry is None:
                raise SurveyServiceError(f"No progress recorded for survey {status.survey_id}")
            if entry["token"] != status.token or response.survey_token != status.token:
                raise StaleTokenError(f"Token for survey {status.survey_id} is no longer valid")
            if entry.get("finished"):
                raise SurveyServiceError(f"Survey {status.survey_id} is already finished")
            if entry.get("next_question_id") != response.question_id:
                raise SurveyServiceError(
                    f"Expected an answer for question {entry.get('next_question_id')}, got {response.question_id}"
                )
            if next_question is not None and not survey.has_question(next_question.id):
                raise SurveyServiceError(f"Question {next_question.id} is not part of survey {survey.id}")

            entry["responses"].append(response.model_dump(mode="json", exclude_none=True))
            entry["next_question_id"] = next_question.id if next_question is not None else None
            entry["finished"] = next_question is None
            entry["token"] = _new_token()
            self._write_state_unlocked(state)

        logger.debug("Recorded answer to question %s of survey %s", response.question_id, status.survey_id)
        return _status_from_entry(survey, entry)

    def recorded_responses(self, survey_id: str) -> List[SurveyResponse]:
        """Return the responses stored for a survey, oldest first."""

        with self._lock:
            entry = self._read_state_unlocked().get(survey_id) or {}
        return [SurveyResponse.model_validate(raw) for raw in entry.get("responses", [])]

    def _survey_unlocked(self, survey_id: str) -> Survey:
        survey = self._surveys_unlocked().get(survey_id)
        if survey is None:
            raise UnknownSurveyError(f"Unknown survey id: {survey_id}")
        return survey

    def _surveys_unlocked(self) -> Dict[str, Survey]:
        if self._surveys is None:
            try:
                payload = json.loads(self._definitions_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise SurveyServiceError(f"Could not read survey definitions: {exc}") from exc
            try:
                surveys = [Survey.model_validate(raw) for raw in payload.get("surveys", [])]
            except ValidationError as exc:
                raise SurveyServiceError(f"Invalid survey definition: {exc}") from exc
            self._surveys = {survey.id: survey for survey in surveys}
        return self._surveys

    def _read_state_unlocked(self) -> Dict[str, Any]:
        if not self._state_path.is_file():
            return {}
        try:
            raw = self._state_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SurveyServiceError(f"Could not read survey state: {exc}") from exc
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable survey state at %s", self._state_path)
            return {}

    def _write_state_unlocked(self, payload: Dict[str, Any]) -> None:
        try:
            self._state_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise SurveyServiceError(f"Could not write survey state: {exc}") from exc


def _new_token() -> str:
    return uuid.uuid4().hex


def _status_from_entry(survey: Survey, entry: Dict[str, Any]) -> SurveyStatus:
    return SurveyStatus(
        survey_id=survey.id,
        title=survey.title,
        token=str(entry["token"]),
        next_question_id=entry.get("next_question_id"),
    )


__all__ = ["FileSurveyService"]
