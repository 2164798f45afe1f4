"""Lab-report narration of a dose reading by an external text generator."""

from typing import Callable, Optional

from ..physics.constants import B_CONST, K_CONST, K_ERROR, MU_CONST
from ..utils.logging import get_logger


logger = get_logger()


NO_EXPLANATION = "No explanation available."
SERVICE_UNAVAILABLE = "Unable to contact the lab AI assistant at this moment."


def build_prompt(distance_cm: float, dose_rate: float) -> str:
    """Lab-supervisor prompt describing the bench and the current reading.

    Args:
        distance_cm: Detector distance behind the PMMA slab in cm
        dose_rate: Displayed dose rate in uSv/h

    Returns:
        Prompt text for the generator
    """
    r_meters = max(distance_cm, 1) / 100
    return (
        "You are a Senior Physics Lab Supervisor. Analyze the current data from "
        "a student's Bremsstrahlung experiment.\n"
        "\n"
        "Experiment Parameters:\n"
        "- Source: Strontium-90 (Sr-90) beta emitter (~20 MBq).\n"
        "- Target: 5mm thick PMMA.\n"
        f"- Detector Position: d = {distance_cm} cm ({r_meters} m) from PMMA.\n"
        f"- Current Reading: {dose_rate} µSv/h.\n"
        "\n"
        "Theoretical Model:\n"
        "The net dose rate H*(d) follows the formula:\n"
        "H*(d) = (K * e^(-μ * d)) / d^2 + b\n"
        "\n"
        "Where:\n"
        f"- K = {K_CONST:.3f} ± {K_ERROR:.3f} m²·µSv/h (Depth dose constant)\n"
        f"- μ = {MU_CONST} m⁻¹ (Attenuation coefficient)\n"
        f"- b = {B_CONST} µSv/h (Background radiation)\n"
        "- d is distance in meters\n"
        "\n"
        "Please provide a short lab report covering:\n"
        f"1. Verification: Calculate the expected value for d={r_meters}m using "
        "the formula and compare with the reading.\n"
        "2. Physics: Briefly explain the terms: inverse square law, exponential "
        "attenuation, and background radiation.\n"
        "3. Safety: Is this level significantly above background?\n"
        "\n"
        "Keep the tone professional, scientific, and concise.\n"
    )


class NarrativeExplainer:
    """Wraps a text generator with the lab's fallback messages.

    The generator is any callable taking a prompt and returning text (or
    None). The simulation never waits on or depends on its answer.

    Attributes:
        generate: Prompt-to-text callable
        fallback: Message returned when the generator fails
    """

    def __init__(
        self,
        generate: Callable[[str], Optional[str]],
        fallback: str = SERVICE_UNAVAILABLE
    ):
        self.generate = generate
        self.fallback = fallback

    def explain(self, distance_cm: float, dose_rate: float) -> str:
        """Narrative for a reading; never raises on generator failure."""
        prompt = build_prompt(distance_cm, dose_rate)
        try:
            text = self.generate(prompt)
        except Exception as e:
            logger.error(f"Narrative generator failed: {e}")
            return self.fallback
        if not text:
            logger.warning("Narrative generator returned an empty answer")
            return NO_EXPLANATION
        return text
