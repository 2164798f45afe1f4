"""Mutable simulation state shared by the engine components."""

from dataclasses import dataclass, field
from typing import Optional

from .data_models import CumulativeCounts, DoseReading, SourceState
from .particle_store import ParticleStore


@dataclass
class SimulationState:
    """All mutable state of one lab session.

    Owned by the simulator and handed to each component call; nothing in the
    engine keeps its own copy.

    Attributes:
        source: Shutter and detector rail position
        store: In-flight particles
        counts: Detector absorptions since reset
        heatmap_mode: Whether the UI shows the field instead of particles
        latest_reading: Most recent noisy dose sample (None before the first)
        tick: Number of frame ticks since start or reset
    """
    source: SourceState = field(default_factory=SourceState)
    store: ParticleStore = field(default_factory=ParticleStore)
    counts: CumulativeCounts = field(default_factory=CumulativeCounts)
    heatmap_mode: bool = False
    latest_reading: Optional[DoseReading] = None
    tick: int = 0
