#!/usr/bin/env python3
"""
Interaction controller: turns pointer, key, slider and button input into
mutations of the simulation context.

Every handler runs to completion on the frame-loop thread; changes take
effect when the next frame is updated and drawn.
"""
import logging
from typing import Optional, Tuple

from . import status
from .constants import DEFAULT_TIME_SPEED, WHEEL_ZOOM_STEP
from .data_models import RuntimeBody
from .simulation import SimulationContext
from .status import StatusSink

logger = logging.getLogger(__name__)


class InteractionController:
    def __init__(self, ctx: SimulationContext, sink: StatusSink):
        self.ctx = ctx
        self.status = sink
        self.speed_value = 1.0

    # -----------------------
    # Toggles and sliders
    # -----------------------

    def set_setting(self, name: str, value: bool) -> None:
        settings = self.ctx.settings
        previous = getattr(settings, name, None)
        settings.set(name, value)
        if previous == bool(value):
            return
        logger.debug("Setting %s -> %s", name, bool(value))
        if name == "distance_ruler" and not value:
            self.ctx.measurement.clear()
            self.status.write(status.RULER_DISTANCE, "")
        elif name == "realistic_scale":
            self._apply_scale_mode()
        elif name == "show_dwarf_planets":
            self.ctx.sync_focus()

    def toggle_setting(self, name: str) -> bool:
        value = not getattr(self.ctx.settings, name)
        self.set_setting(name, value)
        return value

    def toggle_scale(self) -> bool:
        return self.toggle_setting("realistic_scale")

    def _apply_scale_mode(self) -> None:
        realistic = self.ctx.settings.realistic_scale
        logger.info("Switching to %s scale", "realistic" if realistic else "visual")
        self.ctx.rebuild()
        self.status.write(status.RULER_DISTANCE, "")
        self.status.write(status.SCALE_MODE, "Realistic" if realistic else "Visual")

    def set_zoom(self, value: float) -> float:
        zoom = self.ctx.viewport.set_zoom(value)
        self.status.write(status.ZOOM_VALUE, f"{zoom:.1f}x")
        return zoom

    def wheel(self, direction: int, pivot: Optional[Tuple[float, float]] = None) -> float:
        factor = WHEEL_ZOOM_STEP if direction > 0 else 1.0 / WHEEL_ZOOM_STEP
        zoom = self.ctx.viewport.zoom_by(factor, pivot)
        self.status.write(status.ZOOM_VALUE, f"{zoom:.1f}x")
        return zoom

    def set_speed(self, value: float) -> None:
        self.speed_value = float(value)
        self.ctx.time_speed = DEFAULT_TIME_SPEED * self.speed_value
        self.status.write(status.SPEED_VALUE, f"{self.speed_value:.1f}x")

    # -----------------------
    # Buttons
    # -----------------------

    def next_focus(self) -> Optional[RuntimeBody]:
        body = self.ctx.next_focus()
        if body is not None:
            self.status.write(status.FEATURE_INFO, f"{body.name}: {body.elements.info}")
        return body

    def reset_view(self) -> None:
        self.ctx.viewport.reset()
        self.ctx.focus_index = -1
        self.status.write(status.ZOOM_VALUE, f"{self.ctx.viewport.zoom:.1f}x")
        self.status.write(status.FOCUSED_NAME, "None")

    # -----------------------
    # Pointer and window
    # -----------------------

    def pan(self, dx: float, dy: float) -> None:
        self.ctx.viewport.pan_pixels(dx, dy)

    def click(self, screen_pos: Tuple[float, float]) -> Optional[RuntimeBody]:
        """Ruler selection; ignored unless the measurement tool is active."""
        ctx = self.ctx
        if not ctx.settings.distance_ruler:
            return None
        body = ctx.measurement.click(screen_pos, ctx.active_bodies(), ctx.viewport)
        readout = ctx.measurement.readout()
        if readout is not None:
            logger.info("Measured %s", readout)
            self.status.write(status.RULER_DISTANCE, readout)
        return body

    def resize(self, w: int, h: int) -> None:
        logger.info("Canvas resized to %dx%d", w, h)
        self.ctx.resize(w, h)
        self.status.write(status.RULER_DISTANCE, "")

    def publish_labels(self) -> None:
        """Write the initial slider and mode labels."""
        self.status.write(status.ZOOM_VALUE, f"{self.ctx.viewport.zoom:.1f}x")
        self.status.write(status.SPEED_VALUE, f"{self.speed_value:.1f}x")
        self.status.write(status.SCALE_MODE, "Realistic" if self.ctx.settings.realistic_scale else "Visual")
        self.status.write(status.FOCUSED_NAME, "None")
