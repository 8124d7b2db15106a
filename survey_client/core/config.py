from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _as_bool(value: Optional[str], default: bool) -> bool:
    cleaned = _strip_or_none(value)
    if cleaned is None:
        return default
    return cleaned.lower() in _TRUE_VALUES


@dataclass(frozen=True)
class StorageSettings:
    survey_data_path: Path
    survey_state_path: Path


class Settings:

    def __init__(self) -> None:
        data_path = _strip_or_none(os.getenv("SURVEY_DATA_PATH")) or "survey_client/data/surveys.json"
        survey_data_path = Path(data_path).expanduser().resolve()
        if not survey_data_path.is_file():
            raise RuntimeError(f"Survey definitions not found at {survey_data_path}")

        state_path = _strip_or_none(os.getenv("SURVEY_STATE_PATH")) or "survey_client/data/survey_state.json"
        survey_state_path = Path(state_path).expanduser().resolve()
        survey_state_path.parent.mkdir(parents=True, exist_ok=True)

        self.storage = StorageSettings(
            survey_data_path=survey_data_path,
            survey_state_path=survey_state_path,
        )

        self.survey_id = _strip_or_none(os.getenv("SURVEY_ID"))
        self.user_id = _strip_or_none(os.getenv("SURVEY_USER_ID"))
        self.step_counter_enabled = _as_bool(os.getenv("STEP_COUNTER_ENABLED"), default=True)
        self.log_level = (_strip_or_none(os.getenv("LOG_LEVEL")) or "INFO").upper()

    @property
    def is_registered(self) -> bool:
        """Return True when a user id has been provisioned for this client."""

        return self.user_id is not None


settings = Settings()
