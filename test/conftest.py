from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("SURVEY_DATA_PATH", str(PROJECT_ROOT / "survey_client" / "data" / "surveys.json"))
os.environ.setdefault("SURVEY_STATE_PATH", str(Path(tempfile.mkdtemp()) / "survey_state.json"))
os.environ.setdefault("SURVEY_USER_ID", "test-user")

from survey_client.models.survey import BooleanQuestion, Survey, TextQuestion  # noqa: E402


@pytest.fixture
def vaccination_survey() -> Survey:
    return Survey(
        id="vaccination",
        title="Vaccination",
        questions=[
            BooleanQuestion(id=1, question="Have you been vaccinated?"),
            TextQuestion(id=2, question="Any comments?", optional=True, length=10),
        ],
    )
