from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from .steps import StepCounter

logger = logging.getLogger(__name__)

LaunchScreen = Literal["no_access", "survey", "survey_list"]


@dataclass(frozen=True)
class LaunchDecision:
    """Which screen to open first, and for which survey."""

    screen: LaunchScreen
    survey_id: str | None = None
    step_counter_enabled: bool = False


def resolve_launch(
    *,
    registered: bool,
    permission_granted: bool,
    steps: StepCounter,
    survey_id: str | None = None,
) -> LaunchDecision:
    """Decide the start screen and switch the step counter to match the permission.

    Unregistered users only see the no-access screen and the step counter is
    left alone. Otherwise a granted permission starts the counter and a refused
    one stops it, then the requested survey or the survey list opens.
    """

    if not registered:
        logger.info("Launch refused: user is not registered")
        return LaunchDecision(screen="no_access")

    if permission_granted:
        steps.start()
    else:
        steps.stop()

    if survey_id:
        return LaunchDecision(screen="survey", survey_id=survey_id, step_counter_enabled=permission_granted)
    return LaunchDecision(screen="survey_list", step_counter_enabled=permission_granted)
