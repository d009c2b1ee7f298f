"""Graphical user interface components for the SmartBolt dashboard."""

from __future__ import annotations

from .state import (
    AppScreen,
    AppState,
    DashboardSection,
    InvalidTransition,
    SnapshotCell,
    validate_login,
)

__all__ = [
    "AppScreen",
    "AppState",
    "DashboardSection",
    "InvalidTransition",
    "SnapshotCell",
    "validate_login",
]
