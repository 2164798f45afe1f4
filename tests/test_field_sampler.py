import math

import nibabel as nib
import numpy as np
import pytest
import torch

from BremsLabSim.core import FieldSampler
from BremsLabSim.physics.constants import B_CONST
from BremsLabSim.utils import PathValidationError


@pytest.fixture
def sampler(geometry, dose_model):
    return FieldSampler(geometry, dose_model)


def test_grid_covers_scene_in_eight_unit_blocks(sampler):
    grid = sampler.sample_field(True)
    assert grid.shape == (50, 100)
    assert grid.hues.shape == grid.values.shape
    assert grid.block_size == 8
    assert grid.alpha == 0.4


def test_slab_centre_block_is_hot_when_open(sampler, geometry):
    cx, cy = geometry.pmma_center
    grid = sampler.sample_field(True)
    assert grid.hue_at(cx, cy) == pytest.approx(0.0)
    assert grid.value_at(cx, cy) > 50.0


def test_shielded_field_is_uniform_background(sampler, geometry):
    cx, cy = geometry.pmma_center
    grid = sampler.sample_field(False)
    assert grid.hue_at(cx, cy) == pytest.approx(240.0)
    assert torch.allclose(grid.values, torch.full_like(grid.values, B_CONST))
    assert torch.allclose(grid.hues, torch.full_like(grid.hues, 240.0))


def test_block_values_follow_dose_model(sampler, dose_model, geometry):
    grid = sampler.sample_field(True)
    row, col = 25, 60
    block_x, block_y = col * 8 + 4, row * 8 + 4
    cx, cy = geometry.pmma_center
    distance_cm = math.hypot(block_x - cx, block_y - cy) / geometry.px_per_cm
    expected = dose_model.compute_dose(distance_cm, True)
    assert float(grid.values[row, col]) == pytest.approx(expected, rel=1e-5)


def test_hue_rises_towards_blue_away_from_slab(sampler):
    grid = sampler.sample_field(True)
    beam_row = grid.hues[25, 17:].tolist()
    assert all(a <= b for a, b in zip(beam_row, beam_row[1:]))
    assert beam_row[-1] > beam_row[0]


def test_log_normalisation_endpoints(sampler):
    values = torch.tensor([B_CONST, 50.0, 1000.0, 0.01])
    t = sampler.normalize(values)
    assert t.tolist() == pytest.approx([0.0, 1.0, 1.0, 0.0], abs=1e-6)

    mid = math.sqrt(B_CONST * 50.0)
    assert sampler.to_hue(torch.tensor([mid])).item() == pytest.approx(120.0, abs=1e-3)


def test_field_is_cached_per_source_state(sampler):
    assert sampler.sample_field(True) is sampler.sample_field(True)
    assert sampler.sample_field(False) is not sampler.sample_field(True)
    first = sampler.sample_field(True)
    sampler.clear_cache()
    assert sampler.sample_field(True) is not first


def test_hsla_strings(sampler):
    strings = sampler.sample_field(False).hsla_strings()
    assert len(strings) == 50 and len(strings[0]) == 100
    assert strings[0][0] == "hsla(240, 100%, 50%, 0.4)"


def test_export_field_to_nifti(sampler, tmp_path):
    grid = sampler.sample_field(True)
    path = sampler.export_field(grid, tmp_path / 'field' / 'dose_field.nii.gz')

    img = nib.load(path)
    assert img.shape == (100, 50, 1)
    assert np.allclose(np.diag(img.affine)[:3], [20.0, 20.0, 1.0])
    data = np.asarray(img.dataobj)
    assert data[60, 25, 0] == pytest.approx(float(grid.values[25, 60]), rel=1e-5)


def test_export_field_returns_image_without_path(sampler):
    img = sampler.export_field(sampler.sample_field(False))
    assert isinstance(img, nib.Nifti1Image)


def test_export_field_rejects_wrong_suffix(sampler, tmp_path):
    with pytest.raises(PathValidationError):
        sampler.export_field(sampler.sample_field(True), tmp_path / 'field.png')
