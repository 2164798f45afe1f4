"""Core simulation components."""

# Import order matters: the physics package imports data_models, geometry
# and particle_store from here while field_sampler imports physics.
from .data_models import (
    ParticleKind,
    Particle,
    SourceState,
    DoseReading,
    CumulativeCounts,
    FieldGrid,
    ParticleView,
    LabSnapshot
)
from .geometry import LabGeometry, Rect
from .particle_store import ParticleStore
from .state import SimulationState
from .field_sampler import FieldSampler
from .simulation_clock import SimulationClock, PeriodicDriver
from .narrative import NarrativeExplainer, build_prompt
from .session_recorder import SessionRecorder

__all__ = [
    'ParticleKind',
    'Particle',
    'SourceState',
    'DoseReading',
    'CumulativeCounts',
    'FieldGrid',
    'ParticleView',
    'LabSnapshot',
    'LabGeometry',
    'Rect',
    'ParticleStore',
    'SimulationState',
    'FieldSampler',
    'SimulationClock',
    'PeriodicDriver',
    'NarrativeExplainer',
    'build_prompt',
    'SessionRecorder'
]
