#!/usr/bin/env python3
"""
Shared constants for the Orrery viewer (display units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.

Display units are the simulation-space unit: at zoom 1 one display unit is one
screen pixel. Earth's semi-major axis is 140 display units in visual mode.
"""
import math

# Unit bridge: the only conversion between display space and real distance.
DISPLAY_UNITS_PER_AU = 140.0
MKM_PER_AU = 149.6  # million kilometres per astronomical unit


def display_to_au(distance: float) -> float:
    """Convert a display-space distance (at zoom 1) to astronomical units."""
    return distance / DISPLAY_UNITS_PER_AU


def au_to_mkm(au: float) -> float:
    """Convert astronomical units to millions of kilometres."""
    return au * MKM_PER_AU


# Projection
BASE_TILT = 0.92  # vertical compression for the fixed 3-D viewing angle
TWO_PI = 2.0 * math.pi

# Motion pacing
DEFAULT_TIME_SPEED = 0.01  # phase units per frame at slider value 1
INNER_PACING_LIMIT = 200.0  # bodies with a smaller semi-major axis are slowed
INNER_PACING_FACTOR = 0.3
ROTATION_STEP = 0.01  # axial rotation per frame (radians)
DAY_NIGHT_STEP = 0.02

# Trails
TRAIL_CAPACITY = 100

# Realistic scale
REAL_RADIUS_DIVISOR = 10000.0  # km per display unit of body radius
MIN_PLANET_RADIUS = 2.0
MIN_DWARF_RADIUS = 1.5

# Orbit prediction
PREDICTION_WINDOW = math.pi / 4  # one eighth of an orbit ahead
PREDICTION_STEP = 0.1

# Measurement tool
PICK_RADIUS_PX = 50.0
MEASUREMENT_CAPACITY = 2

# Rendering (viewport)
VIEW_WIDTH = 1280
VIEW_HEIGHT = 800
ASTEROID_BELT_GUIDE = 207.0
RING_BANDS = 5
DEFAULT_RING_TILT = 0.3

# Camera zoom bounds (screen pixels per display unit)
DEFAULT_ZOOM = 1.0
MIN_ZOOM = 0.2
MAX_ZOOM = 5.0
WHEEL_ZOOM_STEP = 1.1
KEY_PAN_SPEED = 600  # pixels per second

# Starfield
SHOOTING_STAR_MARGIN = 100  # off-screen margin before a particle respawns
STAR_TWINKLE_FLOOR = 0.3

# Colours
BACKGROUND_STOPS = ((10, 10, 26), (5, 5, 16), (0, 0, 0))
ORBIT_COLOR = (100, 100, 150, 38)
DWARF_ORBIT_COLOR = (150, 100, 200, 38)
FOCUSED_ORBIT_COLOR = (110, 193, 255, 128)
FOCUSED_DWARF_ORBIT_COLOR = (200, 150, 255, 128)
PREDICTION_COLOR = (255, 255, 100, 102)
BELT_GUIDE_COLOR = (150, 150, 150, 26)
FOCUS_COLOR = (110, 193, 255)
DWARF_FOCUS_COLOR = (255, 136, 255)
RULER_FIRST_COLOR = (255, 85, 85)
RULER_SECOND_COLOR = (85, 255, 85)
RULER_LINE_COLOR = (255, 255, 0)
HUD_TEXT_COLOR = (200, 200, 200)

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
