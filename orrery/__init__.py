"""
Orrery core: Keplerian propagation of solar-system bodies and time-windowed trail tracking.
"""
from .data_models import CelestialBody, ElementRates, OrbitalElements, PlanetTrail, TrailPoint
from .kepler import heliocentric_position, orbital_period, orbital_period_days, solve_kepler, update_positions
from .presets_loader import load_catalogue
from .simulation import SimulationController
from .trails import TrailManager, TrailSettings

__version__ = "0.1.0"
