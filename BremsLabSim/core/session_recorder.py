"""HDF5 recording of a lab session's dose readings and heatmaps."""

from pathlib import Path
from typing import Dict, List, Union

import h5py
import numpy as np

from .data_models import DoseReading, FieldGrid
from ..utils.logging import get_logger
from ..utils.path_utils import validate_output_path


logger = get_logger()


class SessionRecorder:
    """Collects readings in memory and writes them to HDF5 on save.

    File layout::

        /readings/tick            int64 [N]
        /readings/dose_rate       float64 [N]  uSv/h
        /readings/distance_cm     int32 [N]
        /readings/source_open     bool [N]
        /readings/counts          int64 [N]
        /fields/<name>/values     float32 [rows, cols]
        /fields/<name>/hues       float32 [rows, cols]

    Attributes:
        ticks: Frame tick at which each reading was taken
        dose_rates: Noisy dose rates in uSv/h
        distances_cm: Detector distances
        source_open: Shutter states
        counts: Cumulative detector counts at each reading
        fields: Heatmap grids by name
    """

    def __init__(self):
        self.ticks: List[int] = []
        self.dose_rates: List[float] = []
        self.distances_cm: List[int] = []
        self.source_open: List[bool] = []
        self.counts: List[int] = []
        self.fields: Dict[str, FieldGrid] = {}

    def __len__(self) -> int:
        return len(self.ticks)

    def record_reading(self, tick: int, reading: DoseReading, counts: int) -> None:
        self.ticks.append(tick)
        self.dose_rates.append(reading.value)
        self.distances_cm.append(reading.distance_cm)
        self.source_open.append(reading.source_open)
        self.counts.append(counts)

    def record_field(self, name: str, grid: FieldGrid) -> None:
        self.fields[name] = grid

    def clear(self) -> None:
        for series in (self.ticks, self.dose_rates, self.distances_cm,
                       self.source_open, self.counts):
            series.clear()
        self.fields.clear()

    def save(self, output_path: Union[str, Path]) -> str:
        """Write the session to an HDF5 file.

        Args:
            output_path: Target .h5/.hdf5 file

        Returns:
            Path of the written file
        """
        path = validate_output_path(output_path, suffixes=('.h5', '.hdf5'))

        with h5py.File(path, 'w') as f:
            readings = f.create_group('readings')
            readings.create_dataset('tick', data=np.asarray(self.ticks, dtype=np.int64))
            readings.create_dataset('dose_rate', data=np.asarray(self.dose_rates, dtype=np.float64))
            readings.create_dataset('distance_cm', data=np.asarray(self.distances_cm, dtype=np.int32))
            readings.create_dataset('source_open', data=np.asarray(self.source_open, dtype=bool))
            readings.create_dataset('counts', data=np.asarray(self.counts, dtype=np.int64))

            fields = f.create_group('fields')
            for name, grid in self.fields.items():
                group = fields.create_group(name)
                group.create_dataset('values', data=grid.values.detach().cpu().numpy().astype(np.float32))
                group.create_dataset('hues', data=grid.hues.detach().cpu().numpy().astype(np.float32))
                group.attrs['block_size'] = grid.block_size
                group.attrs['alpha'] = grid.alpha
                group.attrs['source_open'] = grid.source_open

        logger.info(f"Saved session recording ({len(self)} readings): {path}")
        return str(path)
