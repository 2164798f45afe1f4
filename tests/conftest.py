import numpy as np
import pytest

from BremsLabSim import LabSimulator, SimulationConfig
from BremsLabSim.core import LabGeometry, ParticleStore, CumulativeCounts
from BremsLabSim.physics import DoseModel


class FakeTime:
    """Manual time source whose sleep advances the clock."""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


@pytest.fixture
def geometry():
    return LabGeometry()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def dose_model(rng):
    return DoseModel(rng=rng)


@pytest.fixture
def store():
    return ParticleStore()


@pytest.fixture
def counts():
    return CumulativeCounts()


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def simulator(fake_time):
    config = SimulationConfig(random_seed=42)
    return LabSimulator(config, time_source=fake_time, sleep=fake_time.sleep)
