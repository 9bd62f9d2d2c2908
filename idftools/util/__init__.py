"""
Miscellaneous utilities for the spatial layout of grids.
"""

from idftools.util.spatial import (
    align_like,
    check_same_grid,
    col_index,
    coord_reference,
    empty_2d,
    enlarge,
    grid_extent,
    row_index,
    spatial_reference,
)
from idftools.util.structured import is_nodata
