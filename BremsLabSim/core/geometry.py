"""Static scene geometry of the lab bench.

All coordinates live in the 800x400 visual space used by the renderer,
with 4 units per centimetre. The beam axis runs along ``center_y``.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle ``[x_min, x_max] x [y_min, y_max]``."""
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def contains(self, x: float, y: float) -> bool:
        """Closed containment test (edges count as inside)."""
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x_min + self.x_max) / 2.0, (self.y_min + self.y_max) / 2.0


@dataclass(frozen=True)
class LabGeometry:
    """Positions and sizes of source, PMMA slab and detector probe.

    Attributes:
        canvas_width: Scene width in display units
        canvas_height: Scene height in display units
        px_per_cm: Display units per centimetre
        source_x: x of the source stand
        source_to_pmma_cm: Gap between source and slab in cm
        emission_offset: x offset of the beta emission point from the stand
        pmma_thickness: Visual slab thickness (5 mm drawn wider for visibility)
        pmma_height: Slab height, centred on the beam axis
        detector_width: Probe width
        detector_height: Probe height, centred on the beam axis
        max_distance_cm: Upper end of the detector rail
        boundary_margin: Distance outside the scene at which particles expire
    """
    canvas_width: float = 800.0
    canvas_height: float = 400.0
    px_per_cm: float = 4.0
    source_x: float = 80.0
    source_to_pmma_cm: float = 10.0
    emission_offset: float = 10.0
    pmma_thickness: float = 10.0
    pmma_height: float = 150.0
    detector_width: float = 30.0
    detector_height: float = 60.0
    max_distance_cm: float = 150.0
    boundary_margin: float = 20.0

    @property
    def center_y(self) -> float:
        return self.canvas_height / 2.0

    @property
    def floor_y(self) -> float:
        return self.canvas_height - 20.0

    @property
    def pmma_x(self) -> float:
        return self.source_x + self.source_to_pmma_cm * self.px_per_cm

    @property
    def emission_point(self) -> Tuple[float, float]:
        return self.source_x + self.emission_offset, self.center_y

    @property
    def pmma_center(self) -> Tuple[float, float]:
        return self.pmma_x + self.pmma_thickness / 2.0, self.center_y

    def in_attenuator(self, x: float, y: float) -> bool:
        """True inside the slab; closed in x, open in y."""
        half = self.pmma_height / 2.0
        return (
            self.pmma_x <= x <= self.pmma_x + self.pmma_thickness
            and self.center_y - half < y < self.center_y + half
        )

    def clamp_distance(self, distance_cm: float) -> int:
        """Clamp a rail position to ``[0, max_distance_cm]`` whole centimetres."""
        return int(round(min(max(float(distance_cm), 0.0), self.max_distance_cm)))

    def detector_bounds(self, distance_cm: float) -> Rect:
        """Probe rectangle for a detector placed ``distance_cm`` behind the slab."""
        x_min = self.pmma_x + self.pmma_thickness + distance_cm * self.px_per_cm
        half = self.detector_height / 2.0
        return Rect(
            x_min=x_min,
            x_max=x_min + self.detector_width,
            y_min=self.center_y - half,
            y_max=self.center_y + half,
        )

    def out_of_bounds(self, x: float, y: float) -> bool:
        m = self.boundary_margin
        return (
            x < -m or x > self.canvas_width + m
            or y < -m or y > self.canvas_height + m
        )
