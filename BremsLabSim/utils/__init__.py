"""Utility modules for configuration, logging, and validation."""

from .config import SimulationConfig
from .logging import setup_logger, get_logger
from .validation import ValidationError, InvalidConfigurationError, validate_config
from .path_utils import PathValidationError, validate_output_path

__all__ = [
    'SimulationConfig',
    'setup_logger',
    'get_logger',
    'ValidationError',
    'InvalidConfigurationError',
    'validate_config',
    'PathValidationError',
    'validate_output_path'
]
