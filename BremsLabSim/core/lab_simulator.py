"""Main lab simulation orchestration class."""

from pathlib import Path
from typing import Callable, List, Optional

import numpy as np
import torch

from .data_models import DoseReading, FieldGrid, LabSnapshot
from .field_sampler import FieldSampler
from .geometry import LabGeometry
from .narrative import NarrativeExplainer
from .session_recorder import SessionRecorder
from .simulation_clock import SimulationClock
from .state import SimulationState
from ..physics.dose_model import DoseModel
from ..physics.emitter import Emitter
from ..physics.interaction_resolver import InteractionResolver, InteractionSummary
from ..utils.config import SimulationConfig
from ..utils.logging import setup_logger
from ..utils.validation import validate_config


FrameListener = Callable[[LabSnapshot], None]
DoseListener = Callable[[DoseReading], None]


class LabSimulator:
    """Controller of one Bremsstrahlung lab session.

    Owns the simulation state and wires the engine components:
    - Emitter and InteractionResolver on every frame tick
    - DoseModel noisy sampling on the dose refresh period
    - FieldSampler on demand while the heatmap view is active

    UI inputs (distance, shutter, view mode, reset) and the clock callbacks
    all go through the clock's lock, so they never interleave with a tick.

    Attributes:
        config: Simulation configuration
        geometry: Scene geometry
        state: Mutable session state
        rng: Random generator shared by the stochastic components
        dose_model: Closed-form dose model
        emitter: Particle emitter
        resolver: Interaction resolver
        field_sampler: Heatmap sampler
        clock: Frame and dose scheduler
        recorder: Optional session recorder fed on every dose sample
        logger: Logger instance
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        geometry: Optional[LabGeometry] = None,
        recorder: Optional[SessionRecorder] = None,
        **clock_kwargs
    ):
        """Initialize LabSimulator.

        Args:
            config: Simulation configuration (defaults when None)
            geometry: Scene geometry (standard bench when None)
            recorder: Optional recorder receiving every dose sample
            **clock_kwargs: Forwarded to SimulationClock (time_source, sleep)
        """
        config = config if config is not None else SimulationConfig.get_default_config()
        validate_config(config)
        self.config = config
        self.geometry = geometry if geometry is not None else LabGeometry()

        log_file = config.log_file
        if log_file is None and config.output_path:
            log_file = str(Path(config.output_path) / 'simulation.log')
        self.logger = setup_logger(log_file=log_file)

        self.rng = np.random.default_rng(config.random_seed)
        if config.random_seed is not None:
            torch.manual_seed(config.random_seed)
            self.logger.info(f"Random seed set to {config.random_seed}")

        self.state = SimulationState()
        self.state.source.source_open = config.source_open
        self.state.source.detector_distance_cm = self.geometry.clamp_distance(
            config.initial_distance_cm
        )
        self.state.heatmap_mode = config.heatmap_mode

        self.dose_model = DoseModel(rng=self.rng)
        self.emitter = Emitter(self.geometry, rng=self.rng)
        self.resolver = InteractionResolver(
            self.geometry, rng=self.rng, photon_life=config.photon_life
        )
        self.field_sampler = FieldSampler(
            self.geometry,
            self.dose_model,
            block_size=config.heatmap_block_size,
            max_dose=config.heatmap_max_dose,
            device=config.device,
        )
        self.clock = SimulationClock(
            frame_callback=self.tick,
            dose_callback=self.sample_dose,
            frame_period=config.frame_period_s,
            dose_period=config.dose_period_s,
            **clock_kwargs
        )
        self.recorder = recorder

        self._frame_listeners: List[FrameListener] = []
        self._dose_listeners: List[DoseListener] = []
        self.last_summary = InteractionSummary()

        self.logger.info("LabSimulator initialized")
        self.logger.info(
            f"Configuration: distance={self.state.source.detector_distance_cm} cm, "
            f"source_open={config.source_open}, frame_rate={config.frame_rate_hz} Hz, "
            f"device={config.device}"
        )

    # ------------------------------------------------------------------
    # UI inputs
    # ------------------------------------------------------------------

    def set_detector_distance(self, distance_cm: float) -> int:
        """Move the probe; the value is clamped to the rail.

        Returns:
            The distance actually applied in cm
        """
        with self.clock.lock:
            applied = self.geometry.clamp_distance(distance_cm)
            self.state.source.detector_distance_cm = applied
            self.logger.debug(f"Detector distance set to {applied} cm")
            return applied

    def set_source_open(self, source_open: bool) -> None:
        with self.clock.lock:
            self.state.source.source_open = bool(source_open)
            self.logger.info(
                "Source OPEN" if source_open else "Source SHIELDED"
            )

    def toggle_source(self) -> bool:
        with self.clock.lock:
            self.set_source_open(not self.state.source.source_open)
            return self.state.source.source_open

    def set_heatmap_mode(self, enabled: bool) -> None:
        with self.clock.lock:
            self.state.heatmap_mode = bool(enabled)
            self.logger.debug(f"View mode: {'heatmap' if enabled else 'particles'}")

    def reset(self) -> None:
        """Clear particles and counts; the display drops to background."""
        with self.clock.lock:
            self.state.store.clear()
            self.state.counts.reset()
            self.state.latest_reading = DoseReading(
                value=self.dose_model.background,
                distance_cm=self.state.source.detector_distance_cm,
                source_open=self.state.source.source_open,
            )
            self.state.tick = 0
            self.logger.info("Simulation reset")

    # ------------------------------------------------------------------
    # Clock callbacks
    # ------------------------------------------------------------------

    def tick(self) -> InteractionSummary:
        """One frame: emit, resolve interactions, then notify renderers."""
        with self.clock.lock:
            state = self.state
            source = state.source

            state.store.add_particles(self.emitter.emit(source.source_open, state.tick))
            summary = self.resolver.resolve(
                state.store, state.counts, source.detector_distance_cm
            )
            state.tick += 1
            self.last_summary = summary

            if state.tick % 100 == 0:
                self.logger.debug(
                    f"Tick {state.tick}: particles={state.store.num_active}, "
                    f"counts={state.counts.value}"
                )

            if self._frame_listeners:
                snapshot = self.snapshot()
                for listener in self._frame_listeners:
                    listener(snapshot)

            return summary

    def sample_dose(self) -> DoseReading:
        """Take a noisy dose sample and publish it."""
        with self.clock.lock:
            source = self.state.source
            reading = DoseReading(
                value=self.dose_model.sample_noisy_dose(
                    source.detector_distance_cm, source.source_open
                ),
                distance_cm=source.detector_distance_cm,
                source_open=source.source_open,
            )
            self.state.latest_reading = reading

            if self.recorder is not None:
                self.recorder.record_reading(self.state.tick, reading, self.state.counts.value)
            for listener in self._dose_listeners:
                listener(reading)
            return reading

    def add_frame_listener(self, listener: FrameListener) -> None:
        self._frame_listeners.append(listener)

    def add_dose_listener(self, listener: DoseListener) -> None:
        self._dose_listeners.append(listener)

    # ------------------------------------------------------------------
    # Published state
    # ------------------------------------------------------------------

    @property
    def dose_display(self) -> str:
        """Dose string shown on the display (background before any sample)."""
        reading = self.state.latest_reading
        if reading is None:
            return f"{self.dose_model.background:.3f}"
        return reading.display

    @property
    def counts(self) -> int:
        return self.state.counts.value

    def sample_field(self) -> FieldGrid:
        return self.field_sampler.sample_field(self.state.source.source_open)

    def snapshot(self) -> LabSnapshot:
        """Published view of the session for the current view mode."""
        with self.clock.lock:
            state = self.state
            heatmap = state.heatmap_mode
            return LabSnapshot(
                tick=state.tick,
                dose_rate=self.dose_display,
                counts=state.counts.value,
                source_open=state.source.source_open,
                detector_distance_cm=state.source.detector_distance_cm,
                heatmap_mode=heatmap,
                particles=() if heatmap else state.store.views(),
                field=self.sample_field() if heatmap else None,
            )

    def explain_reading(self, explainer: NarrativeExplainer) -> str:
        """Narrative for the current distance and displayed dose."""
        return explainer.explain(
            self.state.source.detector_distance_cm, float(self.dose_display)
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        self.clock.start()

    def stop(self) -> None:
        self.clock.stop()

    def run(self, duration: Optional[float] = None) -> None:
        """Drive the session on the calling thread until stopped."""
        self.clock.run(duration)

    def run_ticks(self, num_ticks: int, dose_every: Optional[int] = None) -> None:
        """Headless stepping without wall-clock pacing.

        Args:
            num_ticks: Number of frame ticks to run
            dose_every: Take a dose sample every this many ticks (defaults
                to the number of frames in one dose period)
        """
        if dose_every is None:
            dose_every = max(1, round(self.config.dose_period_s * self.config.frame_rate_hz))
        for i in range(num_ticks):
            self.tick()
            if (i + 1) % dose_every == 0:
                self.sample_dose()
