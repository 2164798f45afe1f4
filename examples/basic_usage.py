"""
Basic usage example for the virtual Bremsstrahlung lab.

This example demonstrates how to:
1. Configure and run a headless session
2. Move the probe and close the shutter
3. Export the heatmap field and the session recording
"""

from pathlib import Path

from BremsLabSim import LabSimulator, SimulationConfig
from BremsLabSim.core import NarrativeExplainer, SessionRecorder


def example_distance_scan(output_dir: str = './lab_results'):
    """Scan the probe along the rail and record the readings."""
    print("\n=== Example 1: Distance scan ===\n")

    config = SimulationConfig(random_seed=42, output_path=output_dir)
    recorder = SessionRecorder()
    sim = LabSimulator(config, recorder=recorder)

    for distance in (10, 40, 80, 150):
        sim.set_detector_distance(distance)
        sim.run_ticks(60)
        print(f"  d = {distance:3d} cm  dose = {sim.dose_display} uSv/h  counts = {sim.counts}")

    sim.set_source_open(False)
    sim.run_ticks(60)
    print(f"  shielded       dose = {sim.dose_display} uSv/h  counts = {sim.counts}")

    recorder.record_field('open', sim.field_sampler.sample_field(True))
    recorder.record_field('shielded', sim.field_sampler.sample_field(False))
    path = recorder.save(Path(output_dir) / 'session.h5')
    print(f"\nRecording saved to: {path}")
    return sim


def example_field_export(output_dir: str = './lab_results'):
    """Export the ambient dose field as a NIfTI image."""
    print("\n=== Example 2: Field export ===\n")

    sim = LabSimulator(SimulationConfig(heatmap_mode=True))
    snapshot = sim.snapshot()
    grid = snapshot.field
    print(f"  Grid shape: {grid.shape}")
    print(f"  Dose range: [{grid.values.min():.3f}, {grid.values.max():.3f}] uSv/h")

    path = sim.field_sampler.export_field(grid, Path(output_dir) / 'dose_field.nii.gz')
    print(f"  Field saved to: {path}")


def example_narrative():
    """Ask a (stub) assistant to explain the current reading."""
    print("\n=== Example 3: Narrative ===\n")

    def offline_assistant(prompt: str) -> str:
        return "At this distance the inverse square law dominates the reading."

    sim = LabSimulator(SimulationConfig(random_seed=1))
    sim.run_ticks(30)
    print(f"  {sim.explain_reading(NarrativeExplainer(offline_assistant))}")


if __name__ == '__main__':
    print("Virtual Bremsstrahlung Lab - Basic Usage Examples")
    print("=" * 60)

    example_distance_scan()
    example_field_export()
    example_narrative()
