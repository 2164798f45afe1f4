"""
Bremsstrahlung Lab Simulator

Particle simulation and dose-field engine for a beta-source teaching
experiment: an Sr-90 source, a PMMA attenuator and a movable detector probe.
"""

__version__ = "0.1.0"

from .core.lab_simulator import LabSimulator
from .utils.config import SimulationConfig

__all__ = ['LabSimulator', 'SimulationConfig']
