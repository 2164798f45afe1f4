"""Core data models for the lab simulation."""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, List, Optional, Tuple

import torch


TRAIL_LENGTH = 10


class ParticleKind(Enum):
    """Particle variants; the kind decides interaction and rendering rules."""
    BETA = 'beta'
    PHOTON = 'photon'
    BACKGROUND_PHOTON = 'background_photon'

    @property
    def is_photon(self) -> bool:
        return self is not ParticleKind.BETA


@dataclass
class Particle:
    """A single in-flight particle.

    Attributes:
        x: Horizontal position in display units
        y: Vertical position in display units
        vx: Horizontal displacement per tick
        vy: Vertical displacement per tick
        kind: Current particle kind
        life: Remaining ticks; the particle is removed once this is <= 0
        trail: Last recorded positions, oldest first
        particle_id: Identifier assigned by the particle store
        converted: Whether the beta to photon transition already happened
        detected: Whether the particle was absorbed by the detector
    """
    x: float
    y: float
    vx: float
    vy: float
    kind: ParticleKind
    life: int
    trail: Deque[Tuple[float, float]] = field(
        default_factory=lambda: deque(maxlen=TRAIL_LENGTH)
    )
    particle_id: int = -1
    converted: bool = False
    detected: bool = False

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    @property
    def velocity(self) -> Tuple[float, float]:
        return self.vx, self.vy

    @property
    def is_alive(self) -> bool:
        return self.life > 0

    def advance(self) -> None:
        """Single Euler step and trail update."""
        self.x += self.vx
        self.y += self.vy
        self.trail.append((self.x, self.y))

    def convert_to_photon(self, vx: float, vy: float, life: Optional[int] = None) -> bool:
        """Turn a beta into a Bremsstrahlung photon.

        Returns False (and leaves the particle untouched) unless the particle
        is a beta that has not been converted before.
        """
        if self.kind is not ParticleKind.BETA or self.converted:
            return False
        self.kind = ParticleKind.PHOTON
        self.converted = True
        self.trail.clear()
        self.vx = vx
        self.vy = vy
        if life is not None:
            self.life = life
        return True

    def absorb(self) -> bool:
        """Mark the particle as absorbed by the detector; only counts once."""
        if self.detected or not self.kind.is_photon:
            return False
        self.detected = True
        self.life = 0
        return True

    def expire(self) -> None:
        self.life = 0


@dataclass
class SourceState:
    """Operator-controlled state of the bench.

    Attributes:
        source_open: Whether the source shutter is open
        detector_distance_cm: Probe distance behind the PMMA slab in cm
    """
    source_open: bool = True
    detector_distance_cm: int = 80


@dataclass(frozen=True)
class DoseReading:
    """Latest dose-rate sample shown on the display."""
    value: float
    distance_cm: int
    source_open: bool

    @property
    def display(self) -> str:
        return f"{self.value:.3f}"


@dataclass
class CumulativeCounts:
    """Detector absorptions since the last reset."""
    value: int = 0

    def increment(self, amount: int = 1) -> int:
        self.value += amount
        return self.value

    def reset(self) -> None:
        self.value = 0


@dataclass
class FieldGrid:
    """Heatmap sample of the analytic dose field.

    Attributes:
        values: Dose rate per block in uSv/h [rows, cols]
        hues: HSL hue per block in degrees [rows, cols]
        block_size: Block edge length in display units
        alpha: Fill translucency used by the renderer
        source_open: Source state the grid was sampled for
    """
    values: torch.Tensor
    hues: torch.Tensor
    block_size: int
    alpha: float
    source_open: bool

    @property
    def shape(self) -> Tuple[int, int]:
        rows, cols = self.values.shape
        return int(rows), int(cols)

    def block_index(self, x: float, y: float) -> Tuple[int, int]:
        """(row, col) of the block that contains display point (x, y)."""
        rows, cols = self.shape
        col = min(max(int(x // self.block_size), 0), cols - 1)
        row = min(max(int(y // self.block_size), 0), rows - 1)
        return row, col

    def value_at(self, x: float, y: float) -> float:
        row, col = self.block_index(x, y)
        return float(self.values[row, col])

    def hue_at(self, x: float, y: float) -> float:
        row, col = self.block_index(x, y)
        return float(self.hues[row, col])

    def hsla_strings(self) -> List[List[str]]:
        """CSS colour per block, row-major."""
        return [
            [f"hsla({hue:g}, 100%, 50%, {self.alpha:g})" for hue in row]
            for row in self.hues.cpu().tolist()
        ]


@dataclass(frozen=True)
class ParticleView:
    """Read-only copy of a particle for the renderer."""
    particle_id: int
    x: float
    y: float
    vx: float
    vy: float
    kind: ParticleKind
    life: int
    trail: Tuple[Tuple[float, float], ...]
    opacity: float


@dataclass(frozen=True)
class LabSnapshot:
    """Everything the UI needs for one frame.

    Exactly one of ``particles`` or ``field`` is populated, depending on the
    view mode.
    """
    tick: int
    dose_rate: str
    counts: int
    source_open: bool
    detector_distance_cm: int
    heatmap_mode: bool
    particles: Tuple[ParticleView, ...] = ()
    field: Optional[FieldGrid] = None
