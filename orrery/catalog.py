#!/usr/bin/env python3
"""
Catalog JSON loading.

The catalog is the static description of the system: the sun, planets,
dwarf planets, the asteroid belt and the starfield. The bundled catalog lives
in orrery/data/solar_system.json; a different file can be passed on the
command line.

Schema
======
{
  "name": "Solar System",
  "sun": {"radius": 50, "real_radius": 696340},
  "planets": [
    {
      "name": "Earth", "radius": 13, "real_radius": 6371,
      "semi_major_axis": 140, "real_semi_major_axis": 1.0,
      "eccentricity": 0.017, "orbital_period": 1.0,
      "inclination": 0, "axial_tilt": 23.5,
      "start_angle_pi": 0.7,             # starting phase as a multiple of pi
      "colors": ["#6ec1ff", "#2e86c1"],  # gradient stops, at least two
      "texture": "earth",                # optional texture key
      "terminator": true,                # optional, default true
      "rings": {"inner": 1.3, "outer": 2.3, "opacity": 0.6, "tint": "#dcb478"},
      "moon": {...} | "moons": [{...}]   # optional, mutually exclusive
    }
  ],
  "dwarf_planets": [...],
  "asteroids": {"count": 200, "min_distance": 200, "max_distance": 215,
                "min_radius": 0.8, "max_radius": 2.5},
  "stars": {"count": 400, "shooting_stars": 3}
}

Moon entries: name, radius, distance, orbital_period, optional color,
real_radius, real_distance.
"""
import json
import logging
import math
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .colors import parse_hex
from .data_models import MoonList, MoonSpec, MoonSystem, NoMoons, OrbitalElements, RingSpec, SingleMoon

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
DEFAULT_CATALOG = os.path.join(DATA_DIR, "solar_system.json")


class CatalogError(ValueError):
    """Raised when a catalog file cannot be read or fails validation."""


@dataclass(frozen=True)
class SunSpec:
    radius: float
    real_radius: float


@dataclass(frozen=True)
class BeltSpec:
    count: int
    min_distance: float
    max_distance: float
    min_radius: float
    max_radius: float


@dataclass(frozen=True)
class StarfieldSpec:
    count: int
    shooting_stars: int


@dataclass(frozen=True)
class Catalog:
    name: str
    sun: SunSpec
    planets: Tuple[OrbitalElements, ...]
    dwarf_planets: Tuple[OrbitalElements, ...]
    asteroids: BeltSpec
    stars: StarfieldSpec


def _read_json(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"cannot read catalog {path}: {exc}") from exc


def _require(data: Dict[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise CatalogError(f"{where}: missing field '{key}'")
    return data[key]


def _coerce_color(value: Any, where: str) -> Tuple[int, int, int]:
    try:
        if isinstance(value, str):
            return parse_hex(value)
        r, g, b = int(value[0]), int(value[1]), int(value[2])
    except (TypeError, ValueError, IndexError) as exc:
        raise CatalogError(f"{where}: bad colour {value!r}") from exc
    return (max(0, min(255, r)), max(0, min(255, g)), max(0, min(255, b)))


def _parse_moon(data: Dict[str, Any], where: str) -> MoonSpec:
    name = _require(data, "name", where)
    where = f"{where} moon {name}"
    period = float(_require(data, "orbital_period", where))
    if period <= 0:
        raise CatalogError(f"{where}: orbital_period must be positive")
    real_radius = data.get("real_radius")
    real_distance = data.get("real_distance")
    return MoonSpec(
        name=name,
        radius=float(_require(data, "radius", where)),
        distance=float(_require(data, "distance", where)),
        orbital_period=period,
        color=_coerce_color(data.get("color", "#c0c0c0"), where),
        real_radius=None if real_radius is None else float(real_radius),
        real_distance=None if real_distance is None else float(real_distance),
    )


def _parse_moons(data: Dict[str, Any], where: str) -> MoonSystem:
    if "moon" in data and "moons" in data:
        raise CatalogError(f"{where}: 'moon' and 'moons' are mutually exclusive")
    if "moons" in data:
        return MoonList(tuple(_parse_moon(m, where) for m in data["moons"]))
    if "moon" in data:
        return SingleMoon(_parse_moon(data["moon"], where))
    return NoMoons()


def _parse_rings(data: Optional[Dict[str, Any]], where: str) -> Optional[RingSpec]:
    if data is None:
        return None
    inner = float(_require(data, "inner", where))
    outer = float(_require(data, "outer", where))
    if outer < inner:
        raise CatalogError(f"{where}: ring outer ratio is smaller than inner")
    tint = data.get("tint")
    return RingSpec(
        inner=inner,
        outer=outer,
        opacity=float(data.get("opacity", 0.1)),
        tint=None if tint is None else _coerce_color(tint, where),
    )


def parse_body(data: Dict[str, Any], dwarf: bool = False) -> OrbitalElements:
    """Build OrbitalElements from one catalog entry, validating the orbit."""
    name = _require(data, "name", "body")
    where = f"body {name}"
    eccentricity = float(_require(data, "eccentricity", where))
    if not 0.0 <= eccentricity < 1.0:
        raise CatalogError(f"{where}: eccentricity {eccentricity} outside [0, 1)")
    period = float(_require(data, "orbital_period", where))
    if period <= 0:
        raise CatalogError(f"{where}: orbital_period must be positive")
    colors = tuple(_coerce_color(c, where) for c in _require(data, "colors", where))
    if len(colors) < 2:
        raise CatalogError(f"{where}: at least two colour stops are required")
    return OrbitalElements(
        name=name,
        radius=float(_require(data, "radius", where)),
        real_radius=float(_require(data, "real_radius", where)),
        semi_major_axis=float(_require(data, "semi_major_axis", where)),
        real_semi_major_axis=float(data.get("real_semi_major_axis", 0.0)),
        eccentricity=eccentricity,
        orbital_period=period,
        inclination=float(data.get("inclination", 0.0)),
        axial_tilt=float(data.get("axial_tilt", 0.0)),
        start_angle=float(data.get("start_angle_pi", 0.0)) * math.pi,
        colors=colors,
        texture=data.get("texture"),
        info=data.get("info", ""),
        dwarf=dwarf,
        terminator=bool(data.get("terminator", True)),
        rings=_parse_rings(data.get("rings"), where),
        moons=_parse_moons(data, where),
    )


def load_catalog(path: str = DEFAULT_CATALOG) -> Catalog:
    """
    Load and validate a catalog file.

    Raises CatalogError for unreadable files, missing fields or invalid orbits.
    """
    data = _read_json(path)
    try:
        sun = _require(data, "sun", "catalog")
        belt = _require(data, "asteroids", "catalog")
        stars = _require(data, "stars", "catalog")
        planets: List[OrbitalElements] = [parse_body(p) for p in _require(data, "planets", "catalog")]
        dwarfs: List[OrbitalElements] = [parse_body(p, dwarf=True) for p in data.get("dwarf_planets", [])]
        catalog = Catalog(
            name=data.get("name") or os.path.splitext(os.path.basename(path))[0],
            sun=SunSpec(radius=float(sun["radius"]), real_radius=float(sun.get("real_radius", 0.0))),
            planets=tuple(planets),
            dwarf_planets=tuple(dwarfs),
            asteroids=BeltSpec(
                count=int(belt["count"]),
                min_distance=float(belt["min_distance"]),
                max_distance=float(belt["max_distance"]),
                min_radius=float(belt["min_radius"]),
                max_radius=float(belt["max_radius"]),
            ),
            stars=StarfieldSpec(count=int(stars["count"]), shooting_stars=int(stars["shooting_stars"])),
        )
    except CatalogError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise CatalogError(f"{path}: {exc}") from exc
    logger.info("Loaded catalog '%s': %d planets, %d dwarf planets",
                catalog.name, len(catalog.planets), len(catalog.dwarf_planets))
    return catalog
