#!/usr/bin/env python3
"""
Vector helper functions for 2D plan-view and 3D heliocentric operations.

These are small, fast functions for vector math used throughout the package.
"""
import math
from typing import Tuple

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def vec_len(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def distance_xy(a: Vec2, b: Vec2) -> float:
    """Euclidean distance between two points in the ecliptic plane."""
    return vec_len(vec_sub(a, b))


def vec3_add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def vec3_len(a: Vec3) -> float:
    return math.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def wrap_2pi(angle: float) -> float:
    """Wrap an angle in radians to [0, 2*pi)."""
    y = math.fmod(angle, 2.0 * math.pi)
    if y < 0.0:
        y += 2.0 * math.pi
    # fmod of a tiny negative can round up to exactly 2*pi
    return 0.0 if y >= 2.0 * math.pi else y


def is_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)
