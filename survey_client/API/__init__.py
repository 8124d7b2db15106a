from .file_survey_service import FileSurveyService
from .survey_service import StaleTokenError, SurveyService, SurveyServiceError, UnknownSurveyError

__all__ = ["FileSurveyService", "StaleTokenError", "SurveyService", "SurveyServiceError", "UnknownSurveyError"]
