#!/usr/bin/env python3
"""
Body catalogue JSON loading utilities.

Catalogues live in orrery/celestial_bodies/*.json and list the bodies the orrery tracks.

Schema
======
{
  "name": "Human-friendly catalogue name",
  "description": "Optional description",
  "bodies": [
    {"name": "Sun", "is_sun": true, "radius": 0.05, "color": [253, 184, 19]},
    {
      "name": "Earth",
      "radius": 0.008,                 # display radius in AU
      "color": [74, 144, 226],
      "elements": {                    # JPL mean-longitude set (degrees, rates per century)
        "a": 1.00000261, "e": 0.01671123, "i": -0.00001531,
        "L": 100.46457166, "w_bar": 102.93768193, "node": 0.0,
        "a_dot": 0.00000562, "e_dot": -0.00004392, "i_dot": -0.01294668,
        "L_dot": 35999.37244981, "w_bar_dot": 0.32327364, "node_dot": 0.0
      }
    },
    {
      "name": "Ceres",
      "elements": {                    # classical set (degrees, epoch as Julian Day)
        "a": 2.7675, "e": 0.0758, "i": 10.588,
        "node": 80.305, "arg_periapsis": 73.597, "mean_anomaly": 60.079,
        "epoch": 2459000.5,
        "mean_motion": 0.2141         # optional, degrees per day
      }
    },
    {"name": "Moon", "parent": "Earth", "radius": 0.002}
  ]
}

Users can drop their own JSON files into the folder and they'll be picked up by the loader.
Entries that cannot be parsed are skipped with a warning.
"""
import json
import logging
import math
import os
from typing import List, Optional, Tuple

from .constants import DEFAULT_BODY_COLOR, J2000
from .data_models import CelestialBody, OrbitalElements

logger = logging.getLogger(__name__)

BODIES_DIR = os.path.join(os.path.dirname(__file__), "celestial_bodies")
DEFAULT_CATALOGUE = "solar_system.json"


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      return json.load(f)
  except (OSError, ValueError) as exc:
    logger.warning("Could not read catalogue %s: %s", path, exc)
    return None


def _coerce_color(c: List[int]) -> Tuple[int, int, int]:
  try:
    r, g, b = int(c[0]), int(c[1]), int(c[2])
    r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
    return (r, g, b)
  except (TypeError, ValueError, IndexError):
    return DEFAULT_BODY_COLOR


def _rad(data: dict, key: str) -> float:
  return math.radians(float(data.get(key, 0.0)))


def parse_elements(data: dict) -> OrbitalElements:
  """
  Build OrbitalElements from a catalogue "elements" mapping (angles in degrees).

  Raises KeyError/TypeError/ValueError on malformed input.
  """
  a = float(data["a"])
  e = float(data.get("e", 0.0))
  if "L" in data:
    L_dot = data.get("L_dot")
    return OrbitalElements.from_mean_longitude(
      a=a,
      e=e,
      i=_rad(data, "i"),
      mean_longitude=_rad(data, "L"),
      longitude_of_perihelion=_rad(data, "w_bar"),
      node=_rad(data, "node"),
      a_dot=float(data.get("a_dot", 0.0)),
      e_dot=float(data.get("e_dot", 0.0)),
      i_dot=_rad(data, "i_dot"),
      mean_longitude_dot=None if L_dot is None else math.radians(float(L_dot)),
      longitude_of_perihelion_dot=_rad(data, "w_bar_dot"),
      node_dot=_rad(data, "node_dot"),
      epoch=float(data.get("epoch", J2000)),
    )
  n = data.get("mean_motion")
  return OrbitalElements(
    a=a,
    e=e,
    i=_rad(data, "i"),
    node=_rad(data, "node"),
    arg_periapsis=_rad(data, "arg_periapsis"),
    mean_anomaly=_rad(data, "mean_anomaly"),
    epoch=float(data.get("epoch", J2000)),
    mean_motion=None if n is None else math.radians(float(n)),
  )


def parse_body(data: dict) -> CelestialBody:
  """Build a CelestialBody from one catalogue entry. Raises on malformed input."""
  elements = None
  if data.get("elements") is not None:
    elements = parse_elements(data["elements"])
  return CelestialBody(
    name=str(data["name"]),
    color=_coerce_color(data.get("color", list(DEFAULT_BODY_COLOR))),
    radius=float(data.get("radius", 0.005)),
    is_sun=bool(data.get("is_sun", False)),
    elements=elements,
    parent=data.get("parent"),
  )


def list_catalogues() -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available catalogues."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(BODIES_DIR):
    return items
  for fn in sorted(os.listdir(BODIES_DIR)):
    if not fn.lower().endswith(".json"):
      continue
    data = _read_json(os.path.join(BODIES_DIR, fn)) or {}
    display = data.get("name") or os.path.splitext(fn)[0]
    items.append((fn, display))
  return items


def load_catalogue(file_name: str = DEFAULT_CATALOGUE) -> List[CelestialBody]:
  """
  Load a catalogue by file name (relative to BODIES_DIR) or by path.
  Returns the parsed bodies; duplicate names keep the first entry.
  """
  path = file_name if os.path.isabs(file_name) or os.path.exists(file_name) else os.path.join(BODIES_DIR, file_name)
  data = _read_json(path) or {}
  bodies: List[CelestialBody] = []
  seen = set()
  for entry in data.get("bodies", []):
    try:
      body = parse_body(entry)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
      logger.warning("Skipping malformed body entry %r in %s: %s", entry, file_name, exc)
      continue
    if body.name in seen:
      logger.warning("Duplicate body %s in %s; keeping the first", body.name, file_name)
      continue
    seen.add(body.name)
    bodies.append(body)
  return bodies
