"""Heatmap sampling of the analytic dose field."""

import math
from pathlib import Path
from typing import Dict, Optional, Union

import nibabel as nib
import numpy as np
import torch

from .data_models import FieldGrid
from .geometry import LabGeometry
from ..physics.constants import (
    CM_TO_M,
    HEATMAP_ALPHA,
    HEATMAP_BLOCK_SIZE,
    HEATMAP_MAX_DOSE,
    HUE_COLD,
    HUE_HOT,
)
from ..physics.dose_model import DoseModel
from ..utils.logging import get_logger
from ..utils.path_utils import validate_output_path


logger = get_logger()


class FieldSampler:
    """Samples the dose model on a block grid covering the scene.

    Distances are measured from the centre of the PMMA slab, which acts as
    the Bremsstrahlung emission point. The detector position plays no part,
    so the grid only depends on the shutter state and the static geometry
    and is cached per shutter state.

    Attributes:
        geometry: Scene geometry
        dose_model: Closed-form dose model
        block_size: Block edge length in display units
        max_dose: Dose mapped to the hot end of the colour ramp
        alpha: Fill translucency
        device: Torch device for the grid computation
    """

    def __init__(
        self,
        geometry: LabGeometry,
        dose_model: DoseModel,
        block_size: int = HEATMAP_BLOCK_SIZE,
        max_dose: float = HEATMAP_MAX_DOSE,
        alpha: float = HEATMAP_ALPHA,
        device: str = 'cpu'
    ):
        self.geometry = geometry
        self.dose_model = dose_model
        self.block_size = block_size
        self.max_dose = max_dose
        self.alpha = alpha
        self.device = device
        self._cache: Dict[bool, FieldGrid] = {}

        self.cols = math.ceil(geometry.canvas_width / block_size)
        self.rows = math.ceil(geometry.canvas_height / block_size)
        logger.debug(
            f"FieldSampler initialized: {self.rows}x{self.cols} blocks "
            f"of {block_size} units on {device}"
        )

    def block_centers(self):
        """Display coordinates of every block centre, each [rows, cols]."""
        half = self.block_size / 2.0
        xs = torch.arange(self.cols, dtype=torch.float32, device=self.device) * self.block_size + half
        ys = torch.arange(self.rows, dtype=torch.float32, device=self.device) * self.block_size + half
        grid_y, grid_x = torch.meshgrid(ys, xs, indexing='ij')
        return grid_x, grid_y

    def distance_map(self) -> torch.Tensor:
        """Distance of each block centre to the slab centre in metres [rows, cols]."""
        grid_x, grid_y = self.block_centers()
        cx, cy = self.geometry.pmma_center
        dist_px = torch.sqrt((grid_x - cx) ** 2 + (grid_y - cy) ** 2)
        return dist_px / self.geometry.px_per_cm * CM_TO_M

    def normalize(self, values: torch.Tensor) -> torch.Tensor:
        """Log-scale position of each dose between background and max_dose, in [0, 1]."""
        min_log = math.log10(self.dose_model.background)
        max_log = math.log10(self.max_dose)
        t = (torch.log10(values) - min_log) / (max_log - min_log)
        return torch.clamp(t, 0.0, 1.0)

    def to_hue(self, values: torch.Tensor) -> torch.Tensor:
        """Blue (cold) to red (hot) hue ramp in degrees."""
        t = self.normalize(values)
        return HUE_COLD + t * (HUE_HOT - HUE_COLD)

    def sample_field(self, source_open: bool) -> FieldGrid:
        """Dose grid and colours for the given shutter state.

        Args:
            source_open: Whether the shutter is open

        Returns:
            FieldGrid with values and hues of shape [rows, cols]
        """
        source_open = bool(source_open)
        cached = self._cache.get(source_open)
        if cached is not None:
            return cached

        values = self.dose_model.compute_dose_field(self.distance_map(), source_open)
        grid = FieldGrid(
            values=values,
            hues=self.to_hue(values),
            block_size=self.block_size,
            alpha=self.alpha,
            source_open=source_open,
        )
        self._cache[source_open] = grid

        logger.debug(
            f"Sampled dose field (source_open={source_open}): "
            f"max={torch.max(values).item():.3e} uSv/h"
        )
        return grid

    def clear_cache(self) -> None:
        self._cache.clear()

    def export_field(
        self,
        grid: FieldGrid,
        output_path: Optional[Union[str, Path]] = None
    ) -> Union[str, nib.Nifti1Image]:
        """Export a dose grid as a NIfTI image.

        The image is stored as [cols, rows, 1] (x, y, z) with the block pitch
        in millimetres on the affine diagonal.

        Args:
            grid: Field grid to export
            output_path: Target .nii/.nii.gz file; the image object is
                returned instead when None

        Returns:
            Path of the saved file, or the nibabel image
        """
        data = grid.values.detach().cpu().numpy().T[:, :, np.newaxis].astype(np.float32)
        pitch_mm = grid.block_size / self.geometry.px_per_cm * 10.0
        affine = np.diag([pitch_mm, pitch_mm, 1.0, 1.0])
        img = nib.Nifti1Image(data, affine)

        if output_path is None:
            return img

        path = validate_output_path(output_path, suffixes=('.nii', '.nii.gz'))
        nib.save(img, str(path))
        logger.info(f"Saved dose field: {path}")
        return str(path)
