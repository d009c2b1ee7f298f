"""Abstraction for whatever feeds the dashboard with telemetry."""

from __future__ import annotations

from typing import Protocol

from smartbolt.telemetry.models import DashboardSnapshot


class TelemetrySource(Protocol):
    """Interface for providers that can produce a full dashboard snapshot."""

    def snapshot(self) -> DashboardSnapshot:
        """Return a freshly generated snapshot."""
        raise NotImplementedError
