#!/usr/bin/env python3
"""
Data models for the Orrery viewer.

Static catalog data (OrbitalElements, MoonSpec, RingSpec) is immutable and
loaded once. Runtime state (RuntimeBody, MoonState, Asteroid, Star,
ShootingStar) is rebuilt by the registry on startup, resize and scale toggle.

Units and usage
- semi-major axis, moon distance and display radius are in display units
  (one pixel at zoom 1); real radius is in km, real semi-major axis in AU.
- angles are radians except inclination and axial tilt, which are degrees.
- trail stores recent simulation-space positions (zoom 1) and is a bounded
  deque; appending past capacity drops the oldest point.
"""
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple, Union

from .constants import TRAIL_CAPACITY

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class RingSpec:
    """Ring system as radius ratios of the body's display radius."""
    inner: float
    outer: float
    opacity: float
    tint: Optional[RGB] = None  # None selects the pale blue-grey default


@dataclass(frozen=True)
class MoonSpec:
    name: str
    radius: float
    distance: float
    orbital_period: float  # years
    color: RGB = (192, 192, 192)
    real_radius: Optional[float] = None
    real_distance: Optional[float] = None


# Moon system shapes. A body carries exactly one of these.

@dataclass(frozen=True)
class NoMoons:
    pass


@dataclass(frozen=True)
class SingleMoon:
    moon: MoonSpec


@dataclass(frozen=True)
class MoonList:
    moons: Tuple[MoonSpec, ...]


MoonSystem = Union[NoMoons, SingleMoon, MoonList]


@dataclass(frozen=True)
class OrbitalElements:
    """
    Static description of one orbiting body.

    Fields:
    - radius: hand-tuned display radius used in visual scale mode
    - real_radius: physical radius in km, used in realistic scale mode
    - semi_major_axis: display units; real_semi_major_axis: AU
    - eccentricity: in [0, 1)
    - orbital_period: years
    - inclination, axial_tilt: degrees
    - start_angle: phase the body is reseeded to on every rebuild
    - colors: gradient stops, brightest first
    - terminator: whether the textured disk gets day/night shading
    """
    name: str
    radius: float
    real_radius: float
    semi_major_axis: float
    real_semi_major_axis: float
    eccentricity: float
    orbital_period: float
    inclination: float
    axial_tilt: float
    start_angle: float
    colors: Tuple[RGB, ...]
    texture: Optional[str] = None
    info: str = ""
    dwarf: bool = False
    terminator: bool = True
    rings: Optional[RingSpec] = None
    moons: MoonSystem = field(default_factory=NoMoons)


@dataclass
class MoonState:
    spec: MoonSpec
    angle: float
    angular_velocity: float

    def advance(self, time_speed: float) -> None:
        self.angle += self.angular_velocity * time_speed


@dataclass
class RuntimeBody:
    """
    Mutable per-instance state for a body, derived from its OrbitalElements.

    semi_minor_axis and focal_distance are cached at construction time.
    moon_states mirrors elements.moons: one entry for SingleMoon, one per
    moon for MoonList, empty for NoMoons.
    """
    elements: OrbitalElements
    semi_minor_axis: float
    focal_distance: float
    display_radius: float
    angle: float
    angular_velocity: float
    rotation: float = 0.0
    day_night_angle: float = 0.0
    trail: Deque[Tuple[float, float]] = field(default_factory=lambda: deque(maxlen=TRAIL_CAPACITY))
    moon_states: List[MoonState] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.elements.name

    @property
    def semi_major_axis(self) -> float:
        return self.elements.semi_major_axis

    @property
    def is_dwarf(self) -> bool:
        return self.elements.dwarf

    def add_trail_point(self, position: Tuple[float, float]) -> None:
        """Append a simulation-space position to the trail."""
        self.trail.append(position)


@dataclass
class Asteroid:
    distance: float
    angle: float
    radius: float
    angular_velocity: float
    brightness: float
    inclination: float


@dataclass
class Star:
    x: float
    y: float
    z: float  # depth in [0, 1), drives parallax and size
    radius: float
    blink_speed: float
    opacity: float
    color: RGB

    def twinkle(self, floor: float) -> None:
        self.opacity += self.blink_speed
        if self.opacity > 1.0 or self.opacity < floor:
            self.blink_speed = -self.blink_speed


@dataclass
class ShootingStar:
    x: float
    y: float
    vx: float
    vy: float
    life: float
    max_life: float

    @property
    def alpha(self) -> float:
        if self.max_life <= 0:
            return 0.0
        return max(0.0, min(1.0, self.life / self.max_life))
