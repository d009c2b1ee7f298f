"""Application navigation state and the displayed snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional

from smartbolt.telemetry.models import DashboardSnapshot

logger = logging.getLogger(__name__)


class InvalidTransition(RuntimeError):
    """Raised when a navigation step is not allowed from the current screen."""


class AppScreen(Enum):
    SPLASH = auto()
    LOGIN = auto()
    DASHBOARD = auto()


class DashboardSection(Enum):
    """Sidebar entries of the dashboard."""

    OVERVIEW = "Overview"
    PIPELINES = "Pipelines"
    STATISTICS = "Statistics"


@dataclass(frozen=True)
class AppState:
    """Immutable navigation state; each transition returns a new value."""

    screen: AppScreen = AppScreen.SPLASH
    authenticated: bool = False
    section: DashboardSection = DashboardSection.OVERVIEW

    def to_login(self) -> "AppState":
        return replace(self, screen=AppScreen.LOGIN)

    def to_dashboard(self) -> "AppState":
        if self.screen is AppScreen.SPLASH:
            raise InvalidTransition("cannot open the dashboard before the login screen")
        return replace(self, screen=AppScreen.DASHBOARD, authenticated=True)

    def logout(self) -> "AppState":
        return AppState(screen=AppScreen.LOGIN, authenticated=False)

    def select_section(self, section: DashboardSection) -> "AppState":
        if self.screen is not AppScreen.DASHBOARD:
            raise InvalidTransition(f"cannot select {section.value} outside the dashboard")
        return replace(self, section=section)


def validate_login(email: str, password: str) -> Optional[str]:
    """Return an error message for the login form, or ``None`` if it may proceed.

    There is no credential store; the form only requires both fields.
    """
    if not email.strip() or not password:
        return "Please check your email and password and try again."
    return None


class SnapshotCell:
    """Holds the snapshot on display. Written and read only from the UI thread."""

    def __init__(self, snapshot: Optional[DashboardSnapshot] = None) -> None:
        self._snapshot = snapshot

    @property
    def current(self) -> Optional[DashboardSnapshot]:
        return self._snapshot

    def replace(self, snapshot: DashboardSnapshot) -> Optional[DashboardSnapshot]:
        previous = self._snapshot
        self._snapshot = snapshot
        logger.debug("Snapshot replaced (generated %s)", snapshot.generated_at)
        return previous
