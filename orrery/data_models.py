#!/usr/bin/env python3
"""
Data models for the Orrery.

This module defines the dataclasses shared between the propagator, the trail manager
and whatever renders them.

Units and usage
- Positions are heliocentric ecliptic coordinates in astronomical units [AU].
- Angles are in radians [rad]; times are Julian Days [d].
- CelestialBody.x/y/z are mutated in place by the propagator every tick; the trail
  manager and renderers only read them.
- PlanetTrail.points is mutated by TrailManager.update_position only. Queries hand out
  copies.
"""
import math
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from .constants import DAYS_PER_CENTURY, DEFAULT_BODY_COLOR, J2000


@dataclass(frozen=True)
class ElementRates:
    """Secular drift of orbital elements, per Julian century (AU or rad)."""
    a_dot: float = 0.0
    e_dot: float = 0.0
    i_dot: float = 0.0
    node_dot: float = 0.0
    arg_periapsis_dot: float = 0.0


@dataclass(frozen=True)
class OrbitalElements:
    """
    Keplerian elements of one heliocentric ellipse at a reference epoch.

    Fields:
    - a: Semi-major axis in AU
    - e: Eccentricity (bound orbits, 0 <= e < 1)
    - i: Inclination to the ecliptic in radians
    - node: Longitude of the ascending node in radians
    - arg_periapsis: Argument of periapsis in radians
    - mean_anomaly: Mean anomaly at epoch in radians
    - epoch: Julian Day the elements refer to
    - mean_motion: Optional mean motion in rad/day; derived from a when None
    - rates: Optional secular rates applied relative to J2000
    """
    a: float
    e: float = 0.0
    i: float = 0.0
    node: float = 0.0
    arg_periapsis: float = 0.0
    mean_anomaly: float = 0.0
    epoch: float = J2000
    mean_motion: Optional[float] = None
    rates: Optional[ElementRates] = None

    @classmethod
    def from_mean_longitude(cls, a: float, e: float, i: float, mean_longitude: float,
                            longitude_of_perihelion: float, node: float,
                            a_dot: float = 0.0, e_dot: float = 0.0, i_dot: float = 0.0,
                            mean_longitude_dot: Optional[float] = None,
                            longitude_of_perihelion_dot: float = 0.0,
                            node_dot: float = 0.0,
                            epoch: float = J2000) -> "OrbitalElements":
        """
        Build elements from the JPL (L, varpi, Omega) set.

        Rates are per Julian century, as published in the JPL "approximate positions of
        the planets" tables. Angles are in radians. Without mean_longitude_dot the mean
        motion falls back to Kepler's third law.
        """
        rates = None
        if any((a_dot, e_dot, i_dot, longitude_of_perihelion_dot, node_dot)):
            rates = ElementRates(
                a_dot=a_dot,
                e_dot=e_dot,
                i_dot=i_dot,
                node_dot=node_dot,
                arg_periapsis_dot=longitude_of_perihelion_dot - node_dot,
            )
        mean_motion = None
        if mean_longitude_dot is not None:
            # M = L - varpi, so dM/dt = dL/dt - dvarpi/dt
            mean_motion = (mean_longitude_dot - longitude_of_perihelion_dot) / DAYS_PER_CENTURY
        return cls(
            a=a,
            e=e,
            i=i,
            node=node,
            arg_periapsis=longitude_of_perihelion - node,
            mean_anomaly=mean_longitude - longitude_of_perihelion,
            epoch=epoch,
            mean_motion=mean_motion,
            rates=rates,
        )

    def at_centuries(self, t_centuries: float) -> "OrbitalElements":
        """Return a copy with the secular rates applied for t_centuries."""
        if self.rates is None or t_centuries == 0.0:
            return self
        r = self.rates
        return replace(
            self,
            a=self.a + r.a_dot * t_centuries,
            e=self.e + r.e_dot * t_centuries,
            i=self.i + r.i_dot * t_centuries,
            node=self.node + r.node_dot * t_centuries,
            arg_periapsis=self.arg_periapsis + r.arg_periapsis_dot * t_centuries,
        )

    def is_valid(self) -> bool:
        values = (self.a, self.e, self.i, self.node, self.arg_periapsis, self.mean_anomaly, self.epoch)
        if not all(math.isfinite(v) for v in values):
            return False
        return self.a > 0.0 and self.e >= 0.0


@dataclass
class CelestialBody:
    """
    A body drawn by the orrery.

    Fields:
    - name: Unique identifier; also the trail store key
    - color: RGB tuple used for rendering and copied onto the trail
    - radius: Display radius in AU
    - is_sun: The Sun sits at the origin and never gets a trail
    - elements: Heliocentric orbital elements; None for the Sun and the Moon
    - parent: Name of the body this one orbits when it is not heliocentric
    - x, y, z: Current heliocentric position in AU (written by the propagator)
    - r: Current distance from the parent body in AU (the Sun for planets, Earth for the Moon)
    """
    name: str
    color: Tuple[int, int, int] = DEFAULT_BODY_COLOR
    radius: float = 0.005
    is_sun: bool = False
    elements: Optional[OrbitalElements] = None
    parent: Optional[str] = None
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    r: float = 0.0

    @property
    def position(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def set_position(self, pos: Tuple[float, float, float], r: float) -> None:
        self.x, self.y, self.z = pos
        self.r = r


@dataclass(frozen=True)
class TrailPoint:
    """One historical plan-view sample."""
    x: float
    y: float
    julian_day: float


@dataclass
class PlanetTrail:
    """
    Recorded history of one body.

    points is chronological (oldest first). orbital_period is computed once when the
    trail is created and drives the default display window.
    """
    name: str
    color: Tuple[int, int, int]
    orbital_period: float
    points: List[TrailPoint] = field(default_factory=list)

    def filtered(self, cutoff_julian_day: float) -> "PlanetTrail":
        """Shallow copy holding only the points at or after the cutoff."""
        return replace(self, points=[p for p in self.points if p.julian_day >= cutoff_julian_day])

    def __len__(self) -> int:
        return len(self.points)
