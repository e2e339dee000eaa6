#!/usr/bin/env python3
"""
Simulation state shared between the clock driver and whatever draws the scene.

SimulationController owns the body list, the current Julian Day and the TrailManager. One
controller is created per application start; reset() starts a scenario over. All access is
guarded by a re-entrant lock so a UI thread and a stepping thread can share it.
"""
import logging
import math
import threading
from typing import Iterable, List, Optional

from .constants import DEFAULT_TIME_SCALE, MAX_ECCENTRICITY, MAX_TIME_SCALE
from .data_models import CelestialBody, PlanetTrail
from .kepler import update_positions
from .time_utils import now_julian_day
from .trails import TrailManager, TrailSettings
from .vector_utils import clamp

logger = logging.getLogger(__name__)


class SimulationController:
    """
    Owns the bodies, the simulation clock and the trail store.
    Includes thread-safe operations guarded by a lock.
    """
    def __init__(self, bodies: Optional[Iterable[CelestialBody]] = None,
                 julian_day: Optional[float] = None,
                 trail_settings: Optional[TrailSettings] = None):
        self.lock = threading.RLock()
        self.bodies: List[CelestialBody] = []
        self.playing = True
        self.time_scale = DEFAULT_TIME_SCALE  # simulated days per real second
        self.show_trails = True
        self.start_julian_day = now_julian_day() if julian_day is None else float(julian_day)
        self.julian_day = self.start_julian_day
        self.trails = TrailManager(trail_settings)
        if bodies is not None:
            self.replace_bodies(bodies)

    def replace_bodies(self, new_bodies: Iterable[CelestialBody]) -> None:
        """Swap the body list, drop all trails and propagate to the current time."""
        with self.lock:
            self.bodies = list(new_bodies)
            for b in self.bodies:
                if not b.is_sun and b.elements is None and b.parent is None:
                    logger.warning("Body %s has no orbital elements; it will stay at the origin", b.name)
                elif b.elements is not None and not b.elements.is_valid():
                    logger.warning("Body %s has unusable orbital elements; it will stay at the origin", b.name)
                elif b.elements is not None and b.elements.e >= 1.0:
                    logger.warning("Body %s has eccentricity %.4f; clamping to %.2f",
                                   b.name, b.elements.e, MAX_ECCENTRICITY)
            self.trails.clear_all()
            update_positions(self.bodies, self.julian_day)

    def get_body(self, name: str) -> Optional[CelestialBody]:
        with self.lock:
            for b in self.bodies:
                if b.name == name:
                    return b
            return None

    def set_time_scale(self, days_per_second: float) -> None:
        with self.lock:
            if math.isnan(days_per_second):
                logger.warning("Ignoring NaN time scale")
                return
            self.time_scale = clamp(float(days_per_second), -MAX_TIME_SCALE, MAX_TIME_SCALE)

    def toggle_play(self) -> bool:
        with self.lock:
            self.playing = not self.playing
            return self.playing

    def set_show_trails(self, value: bool) -> None:
        with self.lock:
            self.show_trails = bool(value)

    def set_julian_day(self, julian_day: float) -> None:
        """
        Jump to an arbitrary time. Going backwards is allowed; stored trails are filtered against
        the new time on the next query and on the next accepted sample.
        """
        with self.lock:
            if not math.isfinite(julian_day):
                logger.warning("Ignoring non-finite Julian Day %r", julian_day)
                return
            self.julian_day = float(julian_day)
            update_positions(self.bodies, self.julian_day)

    def tick(self, julian_day: float) -> None:
        """Propagate every body to julian_day and feed the trail store."""
        with self.lock:
            if not math.isfinite(julian_day):
                logger.warning("Ignoring non-finite Julian Day %r", julian_day)
                return
            self.julian_day = float(julian_day)
            update_positions(self.bodies, self.julian_day)
            if self.show_trails:
                for b in self.bodies:
                    self.trails.update_position(b, self.julian_day)

    def step(self, dt_real_seconds: float) -> float:
        """
        Advance the clock by dt_real_seconds * time_scale days when playing.
        Returns the current Julian Day.
        """
        with self.lock:
            if self.playing and dt_real_seconds > 0:
                self.tick(self.julian_day + dt_real_seconds * self.time_scale)
            return self.julian_day

    def run(self, days: float, step_days: float) -> float:
        """Tick forward (or backward) in fixed steps covering `days`. Returns the end time."""
        with self.lock:
            step_days = abs(step_days) or 1.0
            n = int(math.ceil(abs(days) / step_days))
            direction = 1.0 if days >= 0 else -1.0
            start = self.julian_day
            for k in range(1, n + 1):
                self.tick(start + direction * min(k * step_days, abs(days)))
            return self.julian_day

    def get_trail(self, name: str, time_span: Optional[float] = None) -> Optional[PlanetTrail]:
        with self.lock:
            return self.trails.get_trail(name, self.julian_day, time_span)

    def get_all_trails(self, time_span: Optional[float] = None) -> List[PlanetTrail]:
        with self.lock:
            return self.trails.get_all_trails(self.julian_day, time_span)

    def clear_trails(self) -> None:
        with self.lock:
            self.trails.clear_all()

    def reset(self, julian_day: Optional[float] = None) -> None:
        """Start the scenario over: clear trails and return to the start time (or a new one)."""
        with self.lock:
            if julian_day is not None:
                self.start_julian_day = float(julian_day)
            self.julian_day = self.start_julian_day
            self.trails.clear_all()
            update_positions(self.bodies, self.julian_day)
