"""Runtime validation of simulation configuration."""

from pathlib import Path

from .config import SimulationConfig
from .logging import get_logger


logger = get_logger()


class ValidationError(Exception):
    """Base exception for validation errors."""
    pass


class InvalidConfigurationError(ValidationError):
    """Raised when configuration parameters are invalid."""
    pass


def validate_config(config: SimulationConfig) -> None:
    """Validate simulation configuration beyond the dataclass checks.

    Args:
        config: Simulation configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    try:
        if config.output_path:
            output_dir = Path(config.output_path)
            if output_dir.exists() and not output_dir.is_dir():
                raise InvalidConfigurationError(
                    f"output_path exists and is not a directory: {config.output_path}"
                )

        if config.log_file and Path(config.log_file).is_dir():
            raise InvalidConfigurationError(
                f"log_file points to a directory: {config.log_file}"
            )

        if config.device == 'cuda':
            import torch
            if not torch.cuda.is_available():
                raise InvalidConfigurationError(
                    "CUDA device requested but CUDA is not available. "
                    "Set device='cpu' or install CUDA support."
                )

        if config.frame_rate_hz > 240:
            logger.warning(
                f"frame_rate_hz={config.frame_rate_hz} exceeds common display "
                f"refresh rates"
            )

        logger.debug("Configuration validation passed")

    except Exception as e:
        if isinstance(e, InvalidConfigurationError):
            raise
        raise InvalidConfigurationError(f"Configuration validation failed: {str(e)}")
