"""Configuration management for lab simulations."""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import yaml

from ..physics.constants import (
    B_CONST,
    DOSE_SAMPLE_PERIOD_S,
    HEATMAP_BLOCK_SIZE,
    HEATMAP_MAX_DOSE,
    PHOTON_LIFE,
)


@dataclass
class SimulationConfig:
    """Configuration of a lab simulation session.

    Attributes:
        initial_distance_cm: Detector distance behind the PMMA slab at start
        source_open: Whether the shutter starts open
        heatmap_mode: Whether the session starts in heatmap view
        frame_rate_hz: Target rate of the particle tick
        dose_period_s: Interval between dose display refreshes
        random_seed: Random seed for reproducibility (None for random)
        device: Torch device for the heatmap grid ('cuda' or 'cpu')
        heatmap_block_size: Heatmap block edge length in display units
        heatmap_max_dose: Dose in uSv/h mapped to the hot end of the ramp
        photon_life: Life given to a beta when it converts to a photon
            (None keeps the beta's remaining life)
        output_path: Directory for recordings and exports (optional)
        log_file: Log file path (optional)
    """
    initial_distance_cm: int = 80
    source_open: bool = True
    heatmap_mode: bool = False
    frame_rate_hz: float = 60.0
    dose_period_s: float = DOSE_SAMPLE_PERIOD_S
    random_seed: Optional[int] = None
    device: str = 'cpu'
    heatmap_block_size: int = HEATMAP_BLOCK_SIZE
    heatmap_max_dose: float = HEATMAP_MAX_DOSE
    photon_life: Optional[int] = PHOTON_LIFE
    output_path: Optional[str] = None
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration parameters."""
        import torch
        from .logging import get_logger
        logger = get_logger()

        if not 0 <= self.initial_distance_cm <= 150:
            raise ValueError(
                f"initial_distance_cm must be within [0, 150], got {self.initial_distance_cm}"
            )

        if self.frame_rate_hz <= 0:
            raise ValueError(f"frame_rate_hz must be positive, got {self.frame_rate_hz}")

        if self.dose_period_s <= 0:
            raise ValueError(f"dose_period_s must be positive, got {self.dose_period_s}")

        if self.heatmap_block_size <= 0:
            raise ValueError(
                f"heatmap_block_size must be positive, got {self.heatmap_block_size}"
            )

        if self.heatmap_max_dose <= B_CONST:
            raise ValueError(
                f"heatmap_max_dose must exceed the background dose, got {self.heatmap_max_dose}"
            )

        if self.photon_life is not None and self.photon_life <= 0:
            raise ValueError(f"photon_life must be positive, got {self.photon_life}")

        if self.device not in ['cuda', 'cpu']:
            raise ValueError(f"device must be 'cuda' or 'cpu', got {self.device}")

        if self.device == 'cuda' and not torch.cuda.is_available():
            logger.warning("CUDA requested but not available, falling back to CPU")
            self.device = 'cpu'

    @property
    def frame_period_s(self) -> float:
        return 1.0 / self.frame_rate_hz

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'SimulationConfig':
        """Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            SimulationConfig instance
        """
        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}
        return cls(**config_dict)

    def to_yaml(self, yaml_path: str) -> None:
        """Save configuration to YAML file.

        Args:
            yaml_path: Path to save YAML configuration
        """
        Path(yaml_path).parent.mkdir(parents=True, exist_ok=True)
        with open(yaml_path, 'w') as f:
            yaml.dump(asdict(self), f, default_flow_style=False)

    @staticmethod
    def get_default_config() -> 'SimulationConfig':
        """Default bench setup: probe at 80 cm, shutter open, particle view."""
        return SimulationConfig()
