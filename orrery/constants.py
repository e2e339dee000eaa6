#!/usr/bin/env python3
"""
Shared constants for the Orrery (astronomical units unless stated otherwise).

Distances are in astronomical units [AU], times in days [d] on the Julian Day
scale, and angles in radians [rad]. Keeping the tunables in one place makes the
trail density and solver accuracy easy to adjust from a single file.
"""
import math

# Time scale
J2000 = 2451545.0  # Julian Day of 2000-01-01 12:00 TT
DAYS_PER_CENTURY = 36525.0  # Julian century in days

# Physical constants
GAUSSIAN_GRAVITATIONAL_CONSTANT = 0.01720209895  # k, rad/day
TWO_PI = 2.0 * math.pi
KM_PER_AU = 149597870.7

# Kepler solver controls
KEPLER_TOLERANCE = 1e-9  # rad; Newton-Raphson stop criterion
KEPLER_MAX_ITERATIONS = 30  # hard ceiling so high-e orbits still terminate
MAX_ECCENTRICITY = 0.99  # bound orbits only; e >= 1 is clamped to this

# Fallback period for bodies without usable elements (days)
DEFAULT_ORBITAL_PERIOD = 365.25

# Trail sampling and storage
DEFAULT_MAX_TRAIL_POINTS = 2000
MIN_MAX_TRAIL_POINTS = 2
MAX_MAX_TRAIL_POINTS = 100000

DEFAULT_MIN_SAMPLE_DISTANCE = 1e-4  # AU between consecutive stored points
MAX_MIN_SAMPLE_DISTANCE = 1.0

DEFAULT_TRAIL_TIME_SPAN = 90.0  # days of history kept
MIN_TRAIL_TIME_SPAN = 1.0
MAX_TRAIL_TIME_SPAN = 3650.0  # ten years

# Read-time display window derived from orbital period (days)
DISPLAY_WINDOW_PERIOD_FRACTION = 1.0 / 3.0
MIN_DISPLAY_WINDOW = 30.0
MAX_DISPLAY_WINDOW = 365.0

# Simulation clock (simulated days per real second)
DEFAULT_TIME_SCALE = 10.0
MAX_TIME_SCALE = 36525.0

# Display
DEFAULT_BODY_COLOR = (200, 200, 255)
