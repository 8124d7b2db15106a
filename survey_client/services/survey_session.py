from __future__ import annotations

import logging
import threading

from survey_client.API.survey_service import SurveyService, SurveyServiceError
from survey_client.models.response import AnswerSelection, SurveyResponse
from survey_client.models.session import SessionPhase, SurveyCompletion
from survey_client.models.survey import Question, Survey, SurveyStatus

from .answer_builder import AnswerBuilder
from .errors import LoadError, SubmissionError, SurveySessionError
from .question_iterator import QuestionIterator

logger = logging.getLogger(__name__)


class SurveySession:
    """Drive one user through one survey.

    The session starts in ``LOADING``. :meth:`load` fetches the status and the
    survey and moves to ``ACTIVE`` (or ``FINISHED`` when nothing is left to
    answer); a failed fetch moves to ``LOAD_ERROR`` and can be retried with
    another :meth:`load`. Each accepted submission either shows the next
    question or finishes the session. ``FINISHED`` is terminal.

    Only one request runs at a time. Submissions arriving while another
    request is outstanding, or for a question that is no longer current, are
    ignored. Once :meth:`close` is called, results of outstanding requests are
    dropped.
    """

    def __init__(
        self,
        survey_id: str,
        service: SurveyService,
        *,
        builder: AnswerBuilder | None = None,
    ) -> None:
        if not survey_id:
            raise ValueError("survey_id must be provided")
        if service is None:
            raise ValueError("service must be provided")

        self._survey_id = survey_id
        self._service = service
        self._builder = builder or AnswerBuilder()
        self._lock = threading.Lock()

        self._phase = SessionPhase.LOADING
        self._busy = False
        self._closed = False
        self._survey: Survey | None = None
        self._status: SurveyStatus | None = None
        self._iterator: QuestionIterator | None = None
        self._current: Question | None = None
        self._completion: SurveyCompletion | None = None
        self._error: SurveySessionError | None = None

    @property
    def survey_id(self) -> str:
        return self._survey_id

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def finished(self) -> bool:
        return self._phase is SessionPhase.FINISHED

    @property
    def is_busy(self) -> bool:
        """Return True while a load or a submission is outstanding."""

        return self._busy

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def title(self) -> str:
        if self._status is not None and self._status.title:
            return self._status.title
        if self._survey is not None:
            return self._survey.title
        return ""

    @property
    def survey(self) -> Survey | None:
        return self._survey

    @property
    def status(self) -> SurveyStatus | None:
        return self._status

    @property
    def current_question(self) -> Question | None:
        return self._current

    @property
    def completion(self) -> SurveyCompletion | None:
        return self._completion

    @property
    def error(self) -> SurveySessionError | None:
        """Return the last load or submission failure, cleared on success."""

        return self._error

    def load(self) -> None:
        """Fetch the survey and the user's progress.

        Failures do not raise; they move the session to ``LOAD_ERROR`` with
        :attr:`error` set.
        """

        with self._lock:
            if self._closed:
                logger.debug("Ignoring load of closed session for survey %s", self._survey_id)
                return
            if self._busy or self._phase not in (SessionPhase.LOADING, SessionPhase.LOAD_ERROR):
                logger.debug("Ignoring load for survey %s in phase %s", self._survey_id, self._phase.value)
                return
            self._busy = True
            self._phase = SessionPhase.LOADING
            self._error = None

        try:
            try:
                status = self._service.get_survey_status(self._survey_id)
                survey = self._service.get_survey(self._survey_id)
                iterator = QuestionIterator(survey, status.next_question_id)
            except (SurveyServiceError, KeyError) as exc:
                logger.error("Error loading survey %s: %s", self._survey_id, exc)
                with self._lock:
                    if not self._closed:
                        self._phase = SessionPhase.LOAD_ERROR
                        self._error = LoadError(f"Could not load survey {self._survey_id}: {exc}")
                return

            first_question = iterator.next(None)

            with self._lock:
                if self._closed:
                    logger.debug("Discarding load result of closed session for survey %s", self._survey_id)
                    return
                self._status = status
                self._survey = survey
                self._iterator = iterator
                self._advance_to(first_question)
        finally:
            with self._lock:
                self._busy = False

        logger.info("Loaded survey %s in phase %s", self._survey_id, self._phase.value)

    def answer(self, selection: AnswerSelection) -> bool:
        """Build a response from the widget selection and submit it.

        Raises an ``AnswerError`` when the selection is incomplete or invalid;
        the session is left untouched in that case.
        """

        question, token = self._answerable()
        if question is None or token is None:
            return False
        return self.submit(self._builder.build(question, selection, token))

    def skip(self) -> bool:
        """Submit a skipped response for the current, optional question."""

        question, token = self._answerable()
        if question is None or token is None:
            return False
        return self.submit(self._builder.skip(question, token))

    def submit(self, response: SurveyResponse) -> bool:
        """Send ``response`` and move to the next question.

        Returns False when the submission is ignored: another request is
        outstanding, the session is not active or closed, or the response is
        not for the current question. Raises :class:`SubmissionError` when the
        service rejects it; the current question stays in place.
        """

        with self._lock:
            if self._closed or self._busy or self._phase is not SessionPhase.ACTIVE:
                logger.debug("Ignoring submission for question %s", response.question_id)
                return False
            if self._current is None or self._iterator is None or self._status is None:
                return False
            if response.question_id != self._current.id:
                logger.debug(
                    "Ignoring submission for question %s, current question is %s",
                    response.question_id,
                    self._current.id,
                )
                return False
            next_question = self._iterator.peek(response)
            status = self._status
            self._busy = True

        try:
            try:
                updated_status = self._service.answer(status, response, next_question)
            except SurveyServiceError as exc:
                logger.error("Error submitting answer to question %s: %s", response.question_id, exc)
                error = SubmissionError(f"Could not submit the answer: {exc}")
                with self._lock:
                    if not self._closed:
                        self._error = error
                raise error from exc

            with self._lock:
                if self._closed:
                    logger.debug("Discarding submission result of closed session for survey %s", self._survey_id)
                    return False
                self._status = updated_status
                self._error = None
                self._iterator.next(response)
                self._advance_to(next_question)
            return True
        finally:
            with self._lock:
                self._busy = False

    def close(self) -> None:
        """Dispose the session; outstanding results are discarded."""

        with self._lock:
            self._closed = True

    def _answerable(self) -> tuple[Question | None, str | None]:
        with self._lock:
            if self._closed or self._phase is not SessionPhase.ACTIVE or self._status is None:
                return None, None
            return self._current, self._status.token

    def _advance_to(self, question: Question | None) -> None:
        self._current = question
        if question is not None:
            self._phase = SessionPhase.ACTIVE
            return
        self._phase = SessionPhase.FINISHED
        self._completion = SurveyCompletion(survey_id=self._survey_id, title=self.title)
        logger.info("Survey %s finished", self._survey_id)
