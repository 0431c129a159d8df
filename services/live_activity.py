# services/live_activity.py

import logging

from pydantic import BaseModel, Field

from core.models import LiveActivityAction
from services.progress_service import ProgressService

logger = logging.getLogger(__name__)

class LiveActivityState(BaseModel):
    simran_done: bool = False
    paath_angs: int = Field(0, ge=0)

    @property
    def all_done(self) -> bool:
        return self.simran_done and self.paath_angs > 0

class LiveActivityService:
    """Состояние live activity: показывается, пока обе привычки не выполнены"""

    def __init__(self, progress: ProgressService):
        self.progress = progress

    def current_state(self) -> LiveActivityState:
        today = self.progress.clock()
        return LiveActivityState(
            simran_done=self.progress.simran.is_done(today),
            paath_angs=self.progress.reading.daily_delta(today)
        )

    def next_action(self, has_active: bool) -> LiveActivityAction:
        state = self.current_state()
        if state.all_done:
            action = LiveActivityAction.END
        elif has_active:
            action = LiveActivityAction.UPDATE
        else:
            action = LiveActivityAction.START
        logger.debug(f"Live activity action: {action.value} ({state})")
        return action
