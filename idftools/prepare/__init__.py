"""
Prepare model input grids.

This includes :func:`idftools.prepare.correct_boundary` to correct the
boundary around the active cells of a boundary grid, and
:func:`idftools.prepare.resample_nearest_neighbour` to fill sparse grids
within zones. Cell loops are compiled with Numba, to be able to process
large grids.
"""

from idftools.prepare.boundary import (
    correct_boundary,
    correct_outer_cells,
    create_boundary,
    remove_redundant_boundary_cells,
)
from idftools.prepare.resample import (
    ConflictMethod,
    full_zone,
    resample_nearest_neighbour,
    resample_zone,
    split_zones,
)
from idftools.prepare.zonal import ZoneStatistic, resample_zone_statistic
