"""Scrape run state tracking."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

import structlog

from profilescraper.utils.exceptions import InvalidStateTransition

logger = structlog.get_logger(__name__)


class ScrapeState(str, Enum):
    """Stages a scrape run moves through."""

    IDLE = "idle"
    CONFIG_LOADED = "config_loaded"
    BROWSER_ACQUIRED = "browser_acquired"
    HOME_EXTRACTED = "home_extracted"
    FAQ_ATTEMPTED = "faq_attempted"
    PERSISTED = "persisted"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = frozenset({ScrapeState.DONE, ScrapeState.FAILED})

_NEXT_STATE = {
    ScrapeState.IDLE: ScrapeState.CONFIG_LOADED,
    ScrapeState.CONFIG_LOADED: ScrapeState.BROWSER_ACQUIRED,
    ScrapeState.BROWSER_ACQUIRED: ScrapeState.HOME_EXTRACTED,
    ScrapeState.HOME_EXTRACTED: ScrapeState.FAQ_ATTEMPTED,
    ScrapeState.FAQ_ATTEMPTED: ScrapeState.PERSISTED,
    ScrapeState.PERSISTED: ScrapeState.DONE,
}


@dataclass
class ScrapeRun:
    """
    State of a single scrape for one business.

    Runs advance strictly forward through ``ScrapeState``; any non-terminal
    state may drop to ``FAILED``.
    """

    business_id: str
    state: ScrapeState = ScrapeState.IDLE
    history: list[ScrapeState] = field(default_factory=lambda: [ScrapeState.IDLE])
    started_at: datetime = field(default_factory=datetime.utcnow)
    error: str | None = None

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def advance(self, target: ScrapeState) -> None:
        """
        Move the run to ``target``.

        Raises:
            InvalidStateTransition: If ``target`` does not follow the current state
        """
        if target is ScrapeState.FAILED:
            raise InvalidStateTransition(
                "Use fail() to mark a run as failed", self.business_id
            )
        if _NEXT_STATE.get(self.state) is not target:
            raise InvalidStateTransition(
                f"Cannot move from {self.state.value} to {target.value}",
                self.business_id,
            )
        self._enter(target)

    def fail(self, reason: str) -> None:
        """Mark the run as failed."""
        if self.is_finished:
            raise InvalidStateTransition(
                f"Run already finished in state {self.state.value}", self.business_id
            )
        self.error = reason
        self._enter(ScrapeState.FAILED)

    def _enter(self, target: ScrapeState) -> None:
        logger.debug(
            "scrape_state_changed",
            business_id=self.business_id,
            from_state=self.state.value,
            to_state=target.value,
        )
        self.state = target
        self.history.append(target)
