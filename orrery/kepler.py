#!/usr/bin/env python3
"""
Orbit propagator for the Orrery.

Responsibilities
- Derive orbital periods and mean motions from the semi-major axis (Kepler's third law).
- Solve Kepler's equation M = E - e*sin(E) for the eccentric anomaly by Newton-Raphson.
- Turn orbital elements plus a Julian Day into a heliocentric ecliptic position.
- Place the Moon around the Earth with a truncated lunar theory.
- Write the results onto CelestialBody records in place.

Units and conventions
- Distances are in astronomical units [AU].
- Times are Julian Days [d]; secular element rates are per Julian century.
- Angles are in radians [rad].
- The reference frame is heliocentric ecliptic J2000 with the Sun fixed at the origin.

Numerical notes
- Period law: in the normalized system where GM_sun = 1, T = 2*pi*sqrt(a^3) time units. One
  time unit is 1/k days with k the Gaussian gravitational constant, so a = 1 AU gives
  2*pi units, or about 365.2569 days.
- The Newton iteration starts from M for e < 0.8 and from pi otherwise, which converges for
  every bound eccentricity. The iteration count is capped; if the cap is hit the last iterate
  is used.
- Eccentricities at or above 1 are clamped to MAX_ECCENTRICITY (bound orbits only).

Threading
- Everything here is a pure function of its arguments apart from the in-place body updates,
  so different bodies can be propagated from different threads.
"""

import logging
import math
from typing import Iterable, Optional, Tuple

import numpy as np

from .constants import (
    DAYS_PER_CENTURY,
    DEFAULT_ORBITAL_PERIOD,
    GAUSSIAN_GRAVITATIONAL_CONSTANT,
    J2000,
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE,
    KM_PER_AU,
    MAX_ECCENTRICITY,
    TWO_PI,
)
from .data_models import CelestialBody, OrbitalElements
from .vector_utils import Vec3, is_finite, vec3_add, vec3_len, wrap_2pi

logger = logging.getLogger(__name__)

ORIGIN: Vec3 = (0.0, 0.0, 0.0)

# Mean Earth-Moon distance in AU
MOON_MEAN_DISTANCE = 384400.0 / KM_PER_AU


def orbital_period(a: float) -> float:
    """
    Orbital period from Kepler's third law in normalized units (GM = 1).

        T = 2 * pi * sqrt(a^3)

    Args:
        a: Semi-major axis in AU

    Returns:
        Period in normalized time units; DEFAULT_ORBITAL_PERIOD when a is not usable
    """
    if not math.isfinite(a) or a <= 0.0:
        return DEFAULT_ORBITAL_PERIOD
    return TWO_PI * math.sqrt(a * a * a)


def orbital_period_days(a: float) -> float:
    """Orbital period in days: the normalized period scaled by 1/k."""
    if not math.isfinite(a) or a <= 0.0:
        return DEFAULT_ORBITAL_PERIOD
    return orbital_period(a) / GAUSSIAN_GRAVITATIONAL_CONSTANT


def mean_motion(elements: OrbitalElements) -> float:
    """Mean motion in rad/day; the explicit value wins over the period law."""
    if elements.mean_motion is not None:
        return elements.mean_motion
    return TWO_PI / orbital_period_days(elements.a)


def mean_anomaly_at(elements: OrbitalElements, julian_day: float) -> float:
    """Mean anomaly M(t) = M0 + n * (t - epoch), wrapped to [0, 2*pi)."""
    return wrap_2pi(elements.mean_anomaly + mean_motion(elements) * (julian_day - elements.epoch))


def elements_at(elements: OrbitalElements, julian_day: float) -> OrbitalElements:
    """Apply secular rates for the Julian centuries elapsed since J2000."""
    return elements.at_centuries((julian_day - J2000) / DAYS_PER_CENTURY)


def solve_kepler(M: float, e: float, tol: float = KEPLER_TOLERANCE,
                 max_iter: int = KEPLER_MAX_ITERATIONS) -> float:
    """
    Solve Kepler's equation M = E - e*sin(E) for E.

    Args:
        M: Mean anomaly in radians (any range; wrapped internally)
        e: Eccentricity, 0 <= e < 1
        tol: Stop once the Newton step is smaller than this (radians)
        max_iter: Iteration ceiling

    Returns:
        Eccentric anomaly in radians. If the ceiling is reached the last iterate is returned.
    """
    M = wrap_2pi(M)
    if e < 1e-12:
        return M
    E = M if e < 0.8 else math.pi
    for _ in range(max_iter):
        f = E - e * math.sin(E) - M
        fp = 1.0 - e * math.cos(E)
        dE = -f / fp
        E += dE
        if abs(dE) < tol:
            return E
    logger.debug("Kepler solver hit %d iterations (M=%.6f, e=%.6f)", max_iter, M, e)
    return E


def true_anomaly(E: float, e: float) -> float:
    return 2.0 * math.atan2(math.sqrt(1.0 + e) * math.sin(E / 2.0),
                            math.sqrt(1.0 - e) * math.cos(E / 2.0))


def perifocal_to_ecliptic(i: float, node: float, arg_periapsis: float) -> np.ndarray:
    """Rotation matrix taking orbital-plane (PQW) vectors to the ecliptic frame."""
    ci, si = math.cos(i), math.sin(i)
    cO, sO = math.cos(node), math.sin(node)
    co, so = math.cos(arg_periapsis), math.sin(arg_periapsis)
    return np.array([
        [cO * co - sO * so * ci, -cO * so - sO * co * ci,  sO * si],
        [sO * co + cO * so * ci, -sO * so + cO * co * ci, -cO * si],
        [so * si,                 co * si,                 ci],
    ], dtype=float)


def heliocentric_position(elements: Optional[OrbitalElements], julian_day: float) -> Vec3:
    """
    Heliocentric ecliptic position of a body at a Julian Day.

    Workflow:
    1) Apply secular rates for the elapsed centuries
    2) Mean anomaly at the requested time
    3) Eccentric anomaly from Kepler's equation
    4) True anomaly and radius, giving the orbital-plane position
    5) Rotate by argument of periapsis, inclination and node

    Missing or malformed elements (a <= 0, NaN, infinities) give the origin rather than
    NaN coordinates.

    Returns:
        (x, y, z) in AU
    """
    if elements is None or not math.isfinite(julian_day):
        return ORIGIN
    elem = elements_at(elements, julian_day)
    if not elem.is_valid():
        logger.debug("Unusable orbital elements %r; placing body at origin", elem)
        return ORIGIN

    e = elem.e
    if e >= 1.0:
        logger.debug("Eccentricity %.4f is not a bound orbit; clamping to %.2f", e, MAX_ECCENTRICITY)
        e = MAX_ECCENTRICITY

    M = mean_anomaly_at(elem, julian_day)
    E = solve_kepler(M, e)
    nu = true_anomaly(E, e)
    r = elem.a * (1.0 - e * math.cos(E))

    r_pf = np.array([r * math.cos(nu), r * math.sin(nu), 0.0], dtype=float)
    x, y, z = perifocal_to_ecliptic(elem.i, elem.node, elem.arg_periapsis) @ r_pf
    if not is_finite(x, y, z):
        return ORIGIN
    return (float(x), float(y), float(z))


def moon_offset(julian_day: float) -> Tuple[Vec3, float]:
    """
    Geocentric ecliptic offset of the Moon from a truncated lunar theory.

    Keeps the mean longitude, the largest equation-of-centre term, the latitude term and
    the distance variation. Good to about a degree, which is plenty at solar-system scale.

    Returns:
        ((dx, dy, dz), distance) in AU
    """
    T = (julian_day - J2000) / DAYS_PER_CENTURY
    deg = math.pi / 180.0
    L_moon = (218.3164477 + 481267.88123421 * T) * deg
    M_moon = (134.9633964 + 477198.8675055 * T) * deg
    F_moon = (93.2721 + 483202.0175 * T) * deg

    lam = L_moon + 6.2887 * deg * math.sin(M_moon)
    beta = 5.128 * deg * math.sin(F_moon)
    dist = MOON_MEAN_DISTANCE * (1.0 - 0.0549 * math.cos(M_moon))

    offset = (dist * math.cos(beta) * math.cos(lam),
              dist * math.cos(beta) * math.sin(lam),
              dist * math.sin(beta))
    return offset, dist


def moon_position(earth_position: Vec3, julian_day: float) -> Tuple[Vec3, float]:
    """Heliocentric Moon position given Earth's heliocentric position."""
    offset, dist = moon_offset(julian_day)
    return vec3_add(earth_position, offset), dist


def update_body_position(body: CelestialBody, julian_day: float,
                         parent_position: Optional[Vec3] = None) -> None:
    """
    Propagate one body in place.

    The Sun stays at the origin. A body with parent "Earth" uses the lunar model around
    parent_position; without a parent position it is left at the origin offset.
    """
    if body.is_sun:
        body.set_position(ORIGIN, 0.0)
        return
    if body.elements is None and body.parent is not None:
        pos, dist = moon_position(parent_position or ORIGIN, julian_day)
        body.set_position(pos, dist)
        return
    pos = heliocentric_position(body.elements, julian_day)
    body.set_position(pos, vec3_len(pos))


def update_positions(bodies: Iterable[CelestialBody], julian_day: float) -> None:
    """
    Propagate every body in place.

    Heliocentric bodies go first so satellites can be placed relative to their parents.
    """
    bodies = list(bodies)
    positions = {}
    satellites = []
    for body in bodies:
        if body.parent is not None and body.elements is None and not body.is_sun:
            satellites.append(body)
            continue
        update_body_position(body, julian_day)
        positions[body.name] = body.position
    for body in satellites:
        parent_pos = positions.get(body.parent)
        if parent_pos is None:
            logger.debug("Parent %s of %s not propagated; using origin", body.parent, body.name)
        update_body_position(body, julian_day, parent_pos)
