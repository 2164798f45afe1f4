"""Per-tick motion and geometric interactions of the particle population."""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..core.data_models import CumulativeCounts, Particle, ParticleKind
from ..core.geometry import LabGeometry, Rect
from ..core.particle_store import ParticleStore
from ..utils.logging import get_logger
from .constants import BREMSSTRAHLUNG_SPREAD, PHOTON_LIFE, PHOTON_SPEED


logger = get_logger()


@dataclass
class InteractionSummary:
    """What happened to the population during one tick."""
    conversions: int = 0
    detections: int = 0
    escapes: int = 0
    removed: int = 0


class InteractionResolver:
    """Moves particles and applies the attenuator and detector interactions.

    Order per particle and tick: Euler step and trail update, beta to photon
    conversion inside the PMMA slab, absorption inside the detector probe,
    expiry outside the scene margin, life decrement. Dead particles are
    dropped from the store at the end of the same pass.

    Attributes:
        geometry: Scene geometry
        rng: Random generator for the re-emission angle
        photon_speed: Speed of Bremsstrahlung photons per tick
        emission_spread: Total opening angle of the re-emission cone
        photon_life: Life given to a freshly converted photon (None keeps
            the beta's remaining life)
    """

    def __init__(
        self,
        geometry: LabGeometry,
        rng: Optional[np.random.Generator] = None,
        photon_speed: float = PHOTON_SPEED,
        emission_spread: float = BREMSSTRAHLUNG_SPREAD,
        photon_life: Optional[int] = PHOTON_LIFE
    ):
        self.geometry = geometry
        self.rng = rng if rng is not None else np.random.default_rng()
        self.photon_speed = photon_speed
        self.emission_spread = emission_spread
        self.photon_life = photon_life
        logger.debug(
            f"InteractionResolver initialized: photon speed={photon_speed}, "
            f"spread={math.degrees(emission_spread):.0f} deg, "
            f"photon life={photon_life}"
        )

    def resolve(
        self,
        store: ParticleStore,
        counts: CumulativeCounts,
        detector_distance_cm: float
    ) -> InteractionSummary:
        """Advance every particle by one tick.

        Args:
            store: Particle population, mutated in place
            counts: Detector counter, incremented once per absorption
            detector_distance_cm: Current probe distance behind the slab

        Returns:
            Summary of the interactions in this tick
        """
        detector = self.geometry.detector_bounds(detector_distance_cm)
        summary = InteractionSummary()

        for particle in store:
            self.resolve_particle(particle, detector, counts, summary)

        summary.removed = store.compact()
        return summary

    def resolve_particle(
        self,
        particle: Particle,
        detector: Rect,
        counts: CumulativeCounts,
        summary: Optional[InteractionSummary] = None
    ) -> None:
        """Apply one tick of motion and interactions to a single particle."""
        if summary is None:
            summary = InteractionSummary()

        particle.advance()

        if (
            particle.kind is ParticleKind.BETA
            and self.geometry.in_attenuator(particle.x, particle.y)
        ):
            vx, vy = self.sample_photon_velocity()
            if particle.convert_to_photon(vx, vy, life=self.photon_life):
                summary.conversions += 1

        if particle.kind.is_photon and detector.contains(particle.x, particle.y):
            if particle.absorb():
                counts.increment()
                summary.detections += 1

        if particle.is_alive and self.geometry.out_of_bounds(particle.x, particle.y):
            particle.expire()
            summary.escapes += 1

        particle.life -= 1

    def sample_photon_velocity(self):
        """Forward-peaked re-emission direction at fixed photon speed."""
        angle = (self.rng.random() - 0.5) * self.emission_spread
        return (
            math.cos(angle) * self.photon_speed,
            math.sin(angle) * self.photon_speed,
        )
