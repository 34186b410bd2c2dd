#!/usr/bin/env python3
"""
Status display sink: named text fields written by the core each frame.

Writes are fire-and-forget. The Dear PyGui panel in orrery_sim.py implements
the same protocol on top of its text widgets.
"""
from typing import Dict, Protocol

SIM_TIME = "sim_time"
FOCUSED_NAME = "focused_name"
FOCUSED_POSITION = "focused_position"
FOCUSED_DISTANCE = "focused_distance"
FOCUSED_SPEED = "focused_speed"
FOCUSED_PROGRESS = "focused_progress"
FEATURE_INFO = "feature_info"
RULER_DISTANCE = "ruler_distance"
SCALE_MODE = "scale_mode"
ZOOM_VALUE = "zoom_value"
SPEED_VALUE = "speed_value"


class StatusSink(Protocol):
    def write(self, field: str, text: str) -> None:
        ...


class DictStatusSink:
    """Keeps the latest value of every field; used by the HUD and in tests."""

    def __init__(self):
        self.values: Dict[str, str] = {}

    def write(self, field: str, text: str) -> None:
        self.values[field] = text

    def get(self, field: str, default: str = "") -> str:
        return self.values.get(field, default)
