#!/usr/bin/env python3
"""
Distance measurement tool.

Holds up to two selected bodies (Empty -> OneSelected -> TwoSelected). A third
selection evicts the oldest, so the tool stays in TwoSelected with the pair
advanced by one. Distances are measured between the bodies' reference
(epoch) positions, not their animated positions, and converted through the
same unit bridge the stats panel uses.
"""
import logging
from collections import deque
from typing import Deque, Iterable, List, Optional, Tuple

from .camera import Viewport
from .constants import MEASUREMENT_CAPACITY, PICK_RADIUS_PX, au_to_mkm, display_to_au
from .data_models import RuntimeBody
from .orbit_model import reference_position
from .vector_utils import vec_dist

logger = logging.getLogger(__name__)


class MeasurementTool:
    def __init__(self):
        self.points: Deque[RuntimeBody] = deque(maxlen=MEASUREMENT_CAPACITY)

    @property
    def state(self) -> str:
        return ("empty", "one_selected", "two_selected")[len(self.points)]

    def select(self, body: RuntimeBody) -> None:
        self.points.append(body)

    def clear(self) -> None:
        self.points.clear()

    def pick(self, screen_pos: Tuple[float, float], bodies: Iterable[RuntimeBody],
             viewport: Viewport) -> Optional[RuntimeBody]:
        """
        Nearest body to the pointer within PICK_RADIUS_PX screen pixels.

        The pointer is converted to simulation space and compared against each
        body's reference position; the scan is linear.
        """
        target = viewport.to_simulation(screen_pos)
        closest = None
        closest_px = float("inf")
        for body in bodies:
            dist_px = vec_dist(target, reference_position(body)) * viewport.zoom
            if dist_px < closest_px and dist_px < PICK_RADIUS_PX:
                closest_px = dist_px
                closest = body
        return closest

    def click(self, screen_pos: Tuple[float, float], bodies: Iterable[RuntimeBody],
              viewport: Viewport) -> Optional[RuntimeBody]:
        """Pick and select in one step; returns the selected body, if any."""
        body = self.pick(screen_pos, bodies, viewport)
        if body is not None:
            self.select(body)
            logger.debug("Ruler selected %s (%d point(s))", body.name, len(self.points))
        return body

    def reference_points(self) -> List[Tuple[float, float]]:
        return [reference_position(b) for b in self.points]

    def distance_display(self) -> Optional[float]:
        if len(self.points) < 2:
            return None
        p1, p2 = self.reference_points()
        return vec_dist(p1, p2)

    def distance_au(self) -> Optional[float]:
        d = self.distance_display()
        return None if d is None else display_to_au(d)

    def distance_mkm(self) -> Optional[float]:
        au = self.distance_au()
        return None if au is None else au_to_mkm(au)

    def readout(self) -> Optional[str]:
        au = self.distance_au()
        if au is None:
            return None
        first, second = self.points
        return f"{first.name} ↔ {second.name}: {au:.3f} AU ({au_to_mkm(au):.1f}M km)"
