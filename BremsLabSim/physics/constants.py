"""Physical and emission constants for the Bremsstrahlung lab simulation."""

import math

# Dose model H*(10) = K * exp(-mu * d) / d^2 + b
K_CONST = 0.170  # Depth dose constant in m^2 * uSv/h
K_ERROR = 0.024  # Uncertainty on K in m^2 * uSv/h
MU_CONST = 0.02  # Attenuation coefficient in 1/m
B_CONST = 0.15  # Background dose rate in uSv/h

# Conversion factors
CM_TO_M = 0.01
MIN_DISTANCE_M = 0.01  # Distance floor, avoids the 1/d^2 singularity

# Detector fluctuation
NOISE_FRACTION = 0.02  # Multiplicative noise in [1 - f, 1 + f]
DOSE_SAMPLE_PERIOD_S = 0.5
DOSE_DISPLAY_DECIMALS = 3

# Heatmap normalisation
HEATMAP_MAX_DOSE = 50.0  # Dose mapped to the hot end of the colour ramp
HEATMAP_BLOCK_SIZE = 8
HEATMAP_ALPHA = 0.4
HUE_COLD = 240.0  # Blue
HUE_HOT = 0.0  # Red

# Source emission (scaled down from 20 MBq for display)
BETAS_PER_TICK = 3
BETA_SPEED_MIN = 6.0
BETA_SPEED_RANGE = 2.0
BETA_LATERAL_SPREAD = 1.0  # vy drawn from [-spread, spread)
BETA_LIFE = 200

# Ambient background
BACKGROUND_SPAWN_PROBABILITY = 0.3
BACKGROUND_SPEED_MIN = 3.0
BACKGROUND_SPEED_RANGE = 1.0
BACKGROUND_ENTRY_OFFSET = 10.0  # Spawn distance outside the scene edge
BACKGROUND_LIFE = 400

# Bremsstrahlung re-emission in the PMMA slab
PHOTON_SPEED = 4.0
BREMSSTRAHLUNG_SPREAD = math.pi / 1.5  # Total opening angle
PHOTON_LIFE = 400
