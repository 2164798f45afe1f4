"""Container for the in-flight particle population."""

from collections import Counter
from typing import Dict, Iterable, Iterator, List, Tuple

from .data_models import Particle, ParticleKind, ParticleView


# Life value at which a particle's trail is drawn fully opaque
TRAIL_FADE_LIFE = {
    ParticleKind.BETA: 200.0,
    ParticleKind.PHOTON: 400.0,
    ParticleKind.BACKGROUND_PHOTON: 500.0,
}


class ParticleStore:
    """Owns every live particle of the simulation.

    Particles are independent of each other, so ordering carries no meaning;
    insertion order is kept only to make runs with a fixed seed reproducible.

    Attributes:
        particles: Live particles, insertion ordered
        total_spawned: Number of particles ever added since the last clear
    """

    def __init__(self):
        self.particles: List[Particle] = []
        self.total_spawned = 0
        self._next_id = 0

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    @property
    def num_active(self) -> int:
        return len(self.particles)

    def add_particles(self, new_particles: Iterable[Particle]) -> int:
        """Append particles and assign their ids.

        Returns:
            Number of particles added
        """
        n_new = 0
        for particle in new_particles:
            particle.particle_id = self._next_id
            self._next_id += 1
            self.particles.append(particle)
            n_new += 1
        self.total_spawned += n_new
        return n_new

    def compact(self) -> int:
        """Drop particles whose life ran out.

        Returns:
            Number of particles removed
        """
        before = len(self.particles)
        self.particles = [p for p in self.particles if p.life > 0]
        return before - len(self.particles)

    def clear(self) -> None:
        self.particles.clear()
        self.total_spawned = 0

    def count_by_kind(self) -> Dict[ParticleKind, int]:
        counts = Counter(p.kind for p in self.particles)
        return {kind: counts.get(kind, 0) for kind in ParticleKind}

    def views(self) -> Tuple[ParticleView, ...]:
        """Immutable copies of the particles for the render pass."""
        return tuple(
            ParticleView(
                particle_id=p.particle_id,
                x=p.x,
                y=p.y,
                vx=p.vx,
                vy=p.vy,
                kind=p.kind,
                life=p.life,
                trail=tuple(p.trail),
                opacity=min(1.0, max(0.0, p.life / TRAIL_FADE_LIFE[p.kind])),
            )
            for p in self.particles
        )
