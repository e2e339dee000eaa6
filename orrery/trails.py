#!/usr/bin/env python3
"""
Trail tracking for the Orrery.

A TrailManager keeps, per non-Sun body, a bounded and time-windowed history of plan-view
positions, and serves windowed copies of it to the renderer.

Per update the manager:
- skips the Sun,
- creates the body's trail on first sight (orbital period computed once),
- appends the new position unless it is closer than min_distance to the last stored one,
- drops the oldest points while the trail is longer than max_points,
- drops points older than current_time - time_span.

Queries never touch stored history; they filter a copy.

Threading
- The manager holds no lock. Updates to different bodies are independent, but an update and
  a query on the same trail must not overlap; SimulationController serialises both.
"""
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from .constants import (
    DEFAULT_MAX_TRAIL_POINTS,
    DEFAULT_MIN_SAMPLE_DISTANCE,
    DEFAULT_ORBITAL_PERIOD,
    DEFAULT_TRAIL_TIME_SPAN,
    DISPLAY_WINDOW_PERIOD_FRACTION,
    MAX_DISPLAY_WINDOW,
    MAX_MAX_TRAIL_POINTS,
    MAX_MIN_SAMPLE_DISTANCE,
    MAX_TRAIL_TIME_SPAN,
    MIN_DISPLAY_WINDOW,
    MIN_MAX_TRAIL_POINTS,
    MIN_TRAIL_TIME_SPAN,
)
from .data_models import CelestialBody, PlanetTrail, TrailPoint
from .kepler import orbital_period
from .vector_utils import clamp, distance_xy


def _number_or_default(value, default: float) -> float:
    value = float(value)
    return default if math.isnan(value) else value


def _clamp_max_points(n) -> int:
    n = _number_or_default(n, DEFAULT_MAX_TRAIL_POINTS)
    return int(clamp(n, MIN_MAX_TRAIL_POINTS, MAX_MAX_TRAIL_POINTS))


def _clamp_min_distance(d) -> float:
    d = _number_or_default(d, DEFAULT_MIN_SAMPLE_DISTANCE)
    return clamp(d, 0.0, MAX_MIN_SAMPLE_DISTANCE)


def _clamp_time_span(days) -> float:
    days = _number_or_default(days, DEFAULT_TRAIL_TIME_SPAN)
    return clamp(days, MIN_TRAIL_TIME_SPAN, MAX_TRAIL_TIME_SPAN)


@dataclass
class TrailSettings:
    """
    Tunables for trail density and retention. Out-of-range values are clamped, never rejected;
    NaN falls back to the field default.

    Fields:
    - max_points: Hard cap on stored points per trail, oldest evicted first
    - min_distance: Minimum plan-view distance in AU between consecutive samples
    - time_span: Days of history retained behind the current time
    """
    max_points: int = DEFAULT_MAX_TRAIL_POINTS
    min_distance: float = DEFAULT_MIN_SAMPLE_DISTANCE
    time_span: float = DEFAULT_TRAIL_TIME_SPAN

    def __post_init__(self):
        self.max_points = _clamp_max_points(self.max_points)
        self.min_distance = _clamp_min_distance(self.min_distance)
        self.time_span = _clamp_time_span(self.time_span)


def display_window(orbital_period_days: float) -> float:
    """Default read-time window: a third of the period, kept between 30 and 365 days."""
    return clamp(orbital_period_days * DISPLAY_WINDOW_PERIOD_FRACTION, MIN_DISPLAY_WINDOW, MAX_DISPLAY_WINDOW)


class TrailManager:
    """Per-body position history keyed by body name."""

    def __init__(self, settings: Optional[TrailSettings] = None):
        self.settings = settings if settings is not None else TrailSettings()
        self._trails: Dict[str, PlanetTrail] = {}

    def __len__(self) -> int:
        return len(self._trails)

    def __contains__(self, name: str) -> bool:
        return name in self._trails

    def tracked_names(self) -> List[str]:
        return list(self._trails)

    def update_position(self, body: CelestialBody, current_time: float) -> None:
        """
        Record the body's current plan-view position at current_time (Julian Day).

        The first point of a trail is always stored. Later points are stored only if they moved
        at least min_distance from the last stored point; both evictions then run. Non-finite
        times are ignored.
        """
        if body.is_sun or not math.isfinite(current_time):
            return

        trail = self._trails.get(body.name)
        if trail is None:
            trail = PlanetTrail(
                name=body.name,
                color=body.color,
                orbital_period=self._orbital_period(body),
            )
            self._trails[body.name] = trail

        points = trail.points
        if points:
            last = points[-1]
            if distance_xy((body.x, body.y), (last.x, last.y)) < self.settings.min_distance:
                return

        points.append(TrailPoint(x=body.x, y=body.y, julian_day=current_time))

        # Cap first, then the time window
        overflow = len(points) - self.settings.max_points
        if overflow > 0:
            del points[:overflow]

        # Time may run backwards, so the stored points are not assumed sorted here
        cutoff = current_time - self.settings.time_span
        trail.points = [p for p in points if p.julian_day >= cutoff]

    def get_trail(self, name: str, current_time: float,
                  time_span: Optional[float] = None) -> Optional[PlanetTrail]:
        """
        Windowed copy of a body's trail, or None if the body is not tracked.

        Without time_span the window follows the body's orbital period (see display_window).
        """
        trail = self._trails.get(name)
        if trail is None:
            return None
        window = display_window(trail.orbital_period) if time_span is None else time_span
        return trail.filtered(current_time - window)

    def get_all_trails(self, current_time: float,
                       time_span: Optional[float] = None) -> List[PlanetTrail]:
        """Windowed copies of every tracked trail."""
        return [self.get_trail(name, current_time, time_span) for name in list(self._trails)]

    def clear_trail(self, name: str) -> None:
        """Forget one body's trail. Unknown names are ignored."""
        self._trails.pop(name, None)

    def clear_all(self) -> None:
        self._trails.clear()

    def set_trail_time_span(self, days: float) -> None:
        self.settings.time_span = _clamp_time_span(days)

    def get_trail_time_span(self) -> float:
        return self.settings.time_span

    def set_max_points(self, n: int) -> None:
        """Change the point cap; existing trails are trimmed oldest-first."""
        self.settings.max_points = _clamp_max_points(n)
        for trail in self._trails.values():
            overflow = len(trail.points) - self.settings.max_points
            if overflow > 0:
                del trail.points[:overflow]

    def set_min_distance(self, d: float) -> None:
        self.settings.min_distance = _clamp_min_distance(d)

    @staticmethod
    def _orbital_period(body: CelestialBody) -> float:
        if body.elements is None:
            return DEFAULT_ORBITAL_PERIOD
        return orbital_period(body.elements.a)
