"""Physics modules: dose model, particle emission and interactions."""

# dose_model has no core dependencies and must load first; core.field_sampler
# imports it while this package is still initialising.
from .dose_model import DoseModel
from .emitter import Emitter, SceneEdge
from .interaction_resolver import InteractionResolver, InteractionSummary

__all__ = [
    'DoseModel',
    'Emitter',
    'SceneEdge',
    'InteractionResolver',
    'InteractionSummary'
]
