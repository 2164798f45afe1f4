"""Closed-form ambient dose-rate model behind the PMMA target."""

import math
from typing import Optional, Tuple

import numpy as np
import torch

from ..utils.logging import get_logger
from .constants import (
    B_CONST,
    CM_TO_M,
    K_CONST,
    K_ERROR,
    MIN_DISTANCE_M,
    MU_CONST,
    NOISE_FRACTION,
)


logger = get_logger()


class DoseModel:
    """Dose rate H*(10) at a distance d behind the Bremsstrahlung target.

    H*(d) = K * exp(-mu * d) / d^2 + b

    The source term is only added while the shutter is open; the background
    b is always present. Distances below 1 cm are floored to 1 cm instead of
    being rejected.

    Attributes:
        k: Depth dose constant in m^2 * uSv/h
        mu: Attenuation coefficient in 1/m
        background: Background dose rate in uSv/h
        noise_fraction: Half width of the multiplicative detector noise
        rng: Random generator used for the noisy samples
    """

    def __init__(
        self,
        k: float = K_CONST,
        mu: float = MU_CONST,
        background: float = B_CONST,
        noise_fraction: float = NOISE_FRACTION,
        rng: Optional[np.random.Generator] = None
    ):
        self.k = k
        self.mu = mu
        self.background = background
        self.noise_fraction = noise_fraction
        self.rng = rng if rng is not None else np.random.default_rng()
        logger.debug(
            f"DoseModel initialized: K={k}, mu={mu}, b={background}"
        )

    @staticmethod
    def to_meters(distance_cm: float) -> float:
        """Convert a rail distance to metres, floored at MIN_DISTANCE_M."""
        return max(distance_cm * CM_TO_M, MIN_DISTANCE_M)

    def source_term(self, distance_m: float, k: Optional[float] = None) -> float:
        """K * exp(-mu * d) / d^2 for a distance already in metres."""
        k = self.k if k is None else k
        d = max(distance_m, MIN_DISTANCE_M)
        return k * math.exp(-self.mu * d) / (d * d)

    def compute_dose(self, distance_cm: float, source_open: bool) -> float:
        """Theoretical dose rate in uSv/h.

        Args:
            distance_cm: Detector distance behind the target in cm
            source_open: Whether the shutter is open

        Returns:
            Dose rate in uSv/h
        """
        dose = self.background
        if source_open:
            dose += self.source_term(self.to_meters(distance_cm))
        return dose

    def sample_noisy_dose(self, distance_cm: float, source_open: bool) -> float:
        """Dose rate with uniform multiplicative detector fluctuation."""
        noise = 1.0 + self.rng.uniform(-self.noise_fraction, self.noise_fraction)
        return self.compute_dose(distance_cm, source_open) * noise

    def dose_bounds(self, distance_cm: float, source_open: bool) -> Tuple[float, float]:
        """Dose range spanned by the uncertainty K +/- K_ERROR."""
        if not source_open:
            return self.background, self.background
        d = self.to_meters(distance_cm)
        return (
            self.background + self.source_term(d, k=self.k - K_ERROR),
            self.background + self.source_term(d, k=self.k + K_ERROR),
        )

    def max_dose(self) -> float:
        """Largest attainable reading (detector at the distance floor)."""
        return self.background + self.source_term(MIN_DISTANCE_M)

    def compute_dose_field(
        self,
        distances_m: torch.Tensor,
        source_open: bool
    ) -> torch.Tensor:
        """Evaluate the model elementwise on a tensor of distances in metres.

        Args:
            distances_m: Distances in metres [any shape]
            source_open: Whether the shutter is open

        Returns:
            Dose rates in uSv/h, same shape as ``distances_m``
        """
        field = torch.full_like(distances_m, self.background)
        if source_open:
            d = torch.clamp(distances_m, min=MIN_DISTANCE_M)
            field = field + self.k * torch.exp(-self.mu * d) / (d * d)
        return field
