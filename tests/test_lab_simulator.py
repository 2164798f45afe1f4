import pytest

from BremsLabSim import LabSimulator, SimulationConfig
from BremsLabSim.core import (
    FieldGrid,
    NarrativeExplainer,
    ParticleKind,
    SessionRecorder,
)


def test_initial_state_from_config(simulator):
    state = simulator.state
    assert state.source.source_open
    assert state.source.detector_distance_cm == 80
    assert not state.heatmap_mode
    assert simulator.counts == 0
    assert simulator.dose_display == "0.150"


def test_ticks_populate_store_and_detect_photons(simulator):
    simulator.run_ticks(400)
    kinds = simulator.state.store.count_by_kind()
    assert kinds[ParticleKind.BETA] > 0
    assert kinds[ParticleKind.PHOTON] > 0
    assert simulator.counts > 0
    assert simulator.state.tick == 400


def test_shielded_source_only_has_background(simulator):
    simulator.set_source_open(False)
    simulator.run_ticks(200)
    kinds = simulator.state.store.count_by_kind()
    assert kinds[ParticleKind.BETA] == 0
    assert kinds[ParticleKind.PHOTON] == 0


def test_closing_source_stops_new_betas_only(simulator):
    simulator.run_ticks(5)
    assert simulator.toggle_source() is False
    simulator.run_ticks(60)
    assert simulator.state.store.count_by_kind()[ParticleKind.BETA] == 0


@pytest.mark.parametrize("requested, applied", [(-5, 0), (0, 0), (42.6, 43), (150, 150), (400, 150)])
def test_detector_distance_is_clamped(simulator, requested, applied):
    assert simulator.set_detector_distance(requested) == applied
    assert simulator.state.source.detector_distance_cm == applied


def test_reset_clears_counts_and_particles(simulator):
    simulator.run_ticks(300)
    assert simulator.counts > 0

    simulator.reset()
    assert simulator.counts == 0
    assert len(simulator.state.store) == 0
    assert simulator.dose_display == "0.150"

    reading = simulator.sample_dose()
    pure = simulator.dose_model.compute_dose(80, True)
    assert abs(reading.value - pure) <= 0.02 * pure + 1e-12
    assert simulator.dose_display == f"{reading.value:.3f}"


def test_dose_sample_tracks_distance_and_shutter(simulator):
    simulator.set_detector_distance(10)
    near = simulator.sample_dose().value
    simulator.set_detector_distance(150)
    far = simulator.sample_dose().value
    assert near > far

    simulator.set_source_open(False)
    reading = simulator.sample_dose()
    assert 0.147 <= reading.value <= 0.153
    assert not reading.source_open


def test_snapshot_switches_with_view_mode(simulator):
    simulator.run_ticks(10)
    particle_view = simulator.snapshot()
    assert particle_view.field is None
    assert len(particle_view.particles) == len(simulator.state.store)

    simulator.set_heatmap_mode(True)
    heatmap_view = simulator.snapshot()
    assert heatmap_view.particles == ()
    assert isinstance(heatmap_view.field, FieldGrid)
    assert heatmap_view.heatmap_mode


def test_heatmap_ignores_detector_position(simulator):
    simulator.set_heatmap_mode(True)
    before = simulator.snapshot().field.values.clone()
    simulator.set_detector_distance(5)
    after = simulator.snapshot().field.values
    assert (before == after).all()


def test_frame_and_dose_listeners(simulator):
    frames, readings = [], []
    simulator.add_frame_listener(frames.append)
    simulator.add_dose_listener(readings.append)
    simulator.run_ticks(60, dose_every=30)
    assert len(frames) == 60
    assert frames[-1].tick == 60
    assert len(readings) == 2


def test_clock_drives_ticks_and_dose(fake_time):
    config = SimulationConfig(random_seed=1, frame_rate_hz=4.0)
    sim = LabSimulator(config, time_source=fake_time, sleep=fake_time.sleep)
    sim.run(duration=1.0)
    assert sim.state.tick == 4
    assert sim.clock.dose_driver.fired == 2
    assert not sim.clock.running


def test_same_seed_reproduces_run():
    def run():
        sim = LabSimulator(SimulationConfig(random_seed=7))
        sim.run_ticks(150)
        return sim.counts, [(p.x, p.y, p.kind) for p in sim.state.store]

    assert run() == run()


def test_recorder_receives_dose_samples():
    recorder = SessionRecorder()
    sim = LabSimulator(SimulationConfig(random_seed=3), recorder=recorder)
    sim.run_ticks(90, dose_every=30)
    assert len(recorder) == 3
    assert recorder.ticks == [30, 60, 90]
    assert all(d == 80 for d in recorder.distances_cm)


def test_explain_reading_uses_current_state(simulator):
    prompts = []

    def generate(prompt):
        prompts.append(prompt)
        return "Reading consistent with the model."

    simulator.set_detector_distance(40)
    simulator.sample_dose()
    text = simulator.explain_reading(NarrativeExplainer(generate))
    assert text == "Reading consistent with the model."
    assert "d = 40 cm (0.4 m)" in prompts[0]
    assert f"Current Reading: {float(simulator.dose_display)}" in prompts[0]
