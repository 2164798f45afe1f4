"""Per-tick spawning of source betas and ambient background photons."""

from enum import IntEnum
from typing import List, Optional

import numpy as np

from ..core.data_models import Particle, ParticleKind
from ..core.geometry import LabGeometry
from ..utils.logging import get_logger
from .constants import (
    BACKGROUND_ENTRY_OFFSET,
    BACKGROUND_LIFE,
    BACKGROUND_SPAWN_PROBABILITY,
    BACKGROUND_SPEED_MIN,
    BACKGROUND_SPEED_RANGE,
    BETA_LATERAL_SPREAD,
    BETA_LIFE,
    BETA_SPEED_MIN,
    BETA_SPEED_RANGE,
    BETAS_PER_TICK,
)


logger = get_logger()


class SceneEdge(IntEnum):
    """Scene edge a background photon enters through."""
    TOP = 0
    RIGHT = 1
    BOTTOM = 2
    LEFT = 3


class Emitter:
    """Creates new particles for each simulation tick.

    While the shutter is open the Sr-90 source emits a directed beta cone
    towards the PMMA slab. Independently of the shutter, ambient background
    photons cross the scene from a random edge.

    Attributes:
        geometry: Scene geometry
        rng: Random generator
        betas_per_tick: Betas spawned per tick while open
        background_probability: Chance of one background photon per tick
    """

    def __init__(
        self,
        geometry: LabGeometry,
        rng: Optional[np.random.Generator] = None,
        betas_per_tick: int = BETAS_PER_TICK,
        background_probability: float = BACKGROUND_SPAWN_PROBABILITY
    ):
        self.geometry = geometry
        self.rng = rng if rng is not None else np.random.default_rng()
        self.betas_per_tick = betas_per_tick
        self.background_probability = background_probability
        logger.debug(
            f"Emitter initialized: {betas_per_tick} betas/tick, "
            f"background p={background_probability}"
        )

    def emit(self, source_open: bool, tick: int) -> List[Particle]:
        """Particles born on this tick.

        Args:
            source_open: Whether the shutter is open
            tick: Tick number (only used for diagnostics)

        Returns:
            Newly created particles with empty trails
        """
        spawned = []
        if source_open:
            spawned.extend(self.spawn_beta() for _ in range(self.betas_per_tick))
        if self.rng.random() < self.background_probability:
            spawned.append(self.spawn_background_photon())
        if tick % 100 == 0:
            logger.debug(f"Tick {tick}: emitted {len(spawned)} particles")
        return spawned

    def spawn_beta(self) -> Particle:
        """Fast beta leaving the source housing along the beam axis."""
        x, y = self.geometry.emission_point
        return Particle(
            x=x,
            y=y,
            vx=BETA_SPEED_MIN + self.rng.random() * BETA_SPEED_RANGE,
            vy=(self.rng.random() - 0.5) * 2.0 * BETA_LATERAL_SPREAD,
            kind=ParticleKind.BETA,
            life=BETA_LIFE,
        )

    def spawn_background_photon(self, edge: Optional[SceneEdge] = None) -> Particle:
        """Background photon entering through ``edge`` (random if None).

        The component normal to the edge always points into the scene; the
        tangential component is symmetric around zero.
        """
        if edge is None:
            edge = int(self.rng.integers(4))
        edge = SceneEdge(edge)
        speed = BACKGROUND_SPEED_MIN + self.rng.random() * BACKGROUND_SPEED_RANGE
        width = self.geometry.canvas_width
        height = self.geometry.canvas_height
        offset = BACKGROUND_ENTRY_OFFSET

        inward = self.rng.random() * speed
        tangential = (self.rng.random() - 0.5) * speed

        if edge is SceneEdge.TOP:
            x, y = self.rng.random() * width, -offset
            vx, vy = tangential, inward
        elif edge is SceneEdge.RIGHT:
            x, y = width + offset, self.rng.random() * height
            vx, vy = -inward, tangential
        elif edge is SceneEdge.BOTTOM:
            x, y = self.rng.random() * width, height + offset
            vx, vy = tangential, -inward
        else:
            x, y = -offset, self.rng.random() * height
            vx, vy = inward, tangential

        return Particle(
            x=x,
            y=y,
            vx=vx,
            vy=vy,
            kind=ParticleKind.BACKGROUND_PHOTON,
            life=BACKGROUND_LIFE,
        )
