"""Helpers that turn telemetry samples into plottable series."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from smartbolt.telemetry.models import TelemetrySample, TimeRange

Point = Tuple[float, float]


def hour_of_day(timestamp: datetime) -> float:
    return float(timestamp.hour)


def group_by_entity(
    samples: Iterable[TelemetrySample],
    x: Callable[[datetime], float] = hour_of_day,
) -> Dict[str, List[Point]]:
    """Group samples into ``entity_id -> [(x, value), ...]``.

    Keys keep first-seen order and each list keeps the input order; no sorting
    happens here.
    """
    grouped: Dict[str, List[Point]] = {}
    for sample in samples:
        grouped.setdefault(sample.entity_id, []).append((x(sample.timestamp), sample.value))
    return grouped


RANGE_SPANS = {
    TimeRange.HOUR: timedelta(hours=1),
    TimeRange.DAY: timedelta(days=1),
    TimeRange.WEEK: timedelta(days=7),
    TimeRange.MONTH: timedelta(days=30),
}


def within(samples: Iterable[TelemetrySample], time_range: TimeRange, now: datetime) -> List[TelemetrySample]:
    """Samples no older than ``time_range`` relative to ``now``, in input order."""
    cutoff = now - RANGE_SPANS[time_range]
    return [s for s in samples if s.timestamp >= cutoff]


def alert_samples(samples: Iterable[TelemetrySample], entity_id: Optional[str] = None) -> List[TelemetrySample]:
    return [s for s in samples if s.is_alert and (entity_id is None or s.entity_id == entity_id)]


def latest(samples: Iterable[TelemetrySample], entity_id: str) -> Optional[TelemetrySample]:
    """Most recent sample for ``entity_id`` or ``None``."""
    best: Optional[TelemetrySample] = None
    for sample in samples:
        if sample.entity_id != entity_id:
            continue
        if best is None or sample.timestamp > best.timestamp:
            best = sample
    return best
