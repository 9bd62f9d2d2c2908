"""
Correction of boundary grids (IBOUND) around the active cells of a model.

A boundary grid holds three kinds of cells, distinguished by their value:
active cells, boundary cells, and inactive cells. Any other value is left
untouched and acts as a barrier.

The correction consists of two steps:

* :func:`correct_outer_cells` inactivates the active cells that lie outside
  the boundary, or outside a given extent.
* :func:`remove_redundant_boundary_cells` removes boundary cells that are
  redundant because an active cell is already enclosed via its neighbours.

:func:`correct_boundary` runs both; :func:`create_boundary` marks a boundary
around active cells in the first place.
"""

from typing import Optional, Tuple

import numba
import numpy as np
import xarray as xr

from idftools.common.extent import Extent
from idftools.logging import logger
from idftools.logging.logging_decorators import standard_log_decorator
from idftools.util import spatial
from idftools.util.structured import equal, is_nodata


def _same(a: float, b: float) -> bool:
    return a == b or (np.isnan(a) and np.isnan(b))


def _warn_value_collisions(
    active: float, boundary: float, inactive: float, nodata: float
) -> None:
    named = [
        ("active", active),
        ("boundary", boundary),
        ("inactive", inactive),
        ("nodata", nodata),
    ]
    for i, (name_a, a) in enumerate(named):
        for name_b, b in named[i + 1 :]:
            if _same(a, b):
                logger.warning(
                    f"The {name_a} and {name_b} value are both {a}; cells with "
                    "this value cannot be told apart during boundary correction."
                )


def _as_float(grid: xr.DataArray) -> xr.DataArray:
    """Copy of grid with a floating point dtype."""
    if np.issubdtype(grid.dtype, np.floating):
        return grid.copy(deep=True)
    return grid.astype(np.float64)


def _extent_bounds(grid: xr.DataArray, extent: Extent) -> Tuple[int, int, int, int]:
    """
    First and last row and column of grid that lie inside extent. The lower
    and right edge of the extent are exclusive.
    """
    if not extent.is_valid():
        raise ValueError(f"Extent {extent} does not cover any area")
    dx, _, _, dy, _, _ = spatial.spatial_reference(grid)
    nrow, ncol = grid.shape
    top = spatial.row_index(grid, extent.ymax)
    bottom = spatial.row_index(grid, extent.ymin + abs(dy))
    left = spatial.col_index(grid, extent.xmin)
    right = spatial.col_index(grid, extent.xmax - abs(dx))
    top = min(max(top, 0), nrow)
    bottom = min(max(bottom, -1), nrow - 1)
    left = min(max(left, 0), ncol)
    right = min(max(right, -1), ncol - 1)
    return top, bottom, left, right


@numba.njit
def _outer_fill(values, active, boundary, inactive):
    """
    Breadth first fill from the grid edge, through active cells only. Every
    visited active cell is inactivated. Returns the number of visited cells.
    """
    nrow, ncol = values.shape
    visited = np.zeros((nrow, ncol), dtype=np.bool_)
    # Every cell enters the queue at most once.
    queue_row = np.empty(nrow * ncol, dtype=np.int64)
    queue_col = np.empty(nrow * ncol, dtype=np.int64)
    head = 0
    tail = 0

    for i in range(nrow):
        for j in range(ncol):
            on_edge = i == 0 or j == 0 or i == nrow - 1 or j == ncol - 1
            if on_edge and not equal(values[i, j], boundary):
                queue_row[tail] = i
                queue_col[tail] = j
                visited[i, j] = True
                tail += 1

    while head < tail:
        i = queue_row[head]
        j = queue_col[head]
        head += 1
        if equal(values[i, j], active):
            values[i, j] = inactive
        for di, dj in ((-1, 0), (0, -1), (0, 1), (1, 0)):
            ii = i + di
            jj = j + dj
            if ii < 0 or ii >= nrow or jj < 0 or jj >= ncol:
                continue
            if visited[ii, jj] or not equal(values[ii, jj], active):
                continue
            queue_row[tail] = ii
            queue_col[tail] = jj
            visited[ii, jj] = True
            tail += 1
    return tail


@numba.njit
def _is_outer(values, i, j, inactive, nodata):
    nrow, ncol = values.shape
    if i < 0 or i >= nrow or j < 0 or j >= ncol:
        return False
    return equal(values[i, j], inactive) or equal(values[i, j], nodata)


@numba.njit
def _prune_diagonal(values, active, boundary, inactive, nodata):
    """
    Single row-major scan which inactivates diagonally redundant boundary
    cells in place. Returns the number of inactivated cells.
    """
    nrow, ncol = values.shape
    last_row = nrow - 1
    last_col = ncol - 1
    changed = 0
    for i in range(nrow):
        for j in range(ncol):
            if not equal(values[i, j], boundary):
                continue
            top = i > 0 and equal(values[i - 1, j], boundary)
            left = j > 0 and equal(values[i, j - 1], boundary)
            bottom = i < last_row and equal(values[i + 1, j], boundary)
            right = j < last_col and equal(values[i, j + 1], boundary)

            redundant = False
            # AB.
            # BX.
            # ...
            if top and left and equal(values[i - 1, j - 1], active):
                redundant = redundant or (
                    _is_outer(values, i + 1, j, inactive, nodata)
                    or _is_outer(values, i, j + 1, inactive, nodata)
                )
            # .BA
            # .XB
            # ...
            if top and right and equal(values[i - 1, j + 1], active):
                redundant = redundant or (
                    _is_outer(values, i + 1, j, inactive, nodata)
                    or _is_outer(values, i, j - 1, inactive, nodata)
                )
            # ...
            # .XB
            # .BA
            if bottom and right and equal(values[i + 1, j + 1], active):
                redundant = redundant or (
                    _is_outer(values, i - 1, j, inactive, nodata)
                    or _is_outer(values, i, j - 1, inactive, nodata)
                )
            # ...
            # BX.
            # AB.
            if bottom and left and equal(values[i + 1, j - 1], active):
                redundant = redundant or (
                    _is_outer(values, i - 1, j, inactive, nodata)
                    or _is_outer(values, i, j + 1, inactive, nodata)
                )

            if not redundant and 0 < i < last_row and 0 < j < last_col:
                redundant = not (
                    equal(values[i - 1, j], active)
                    or equal(values[i + 1, j], active)
                    or equal(values[i, j - 1], active)
                    or equal(values[i, j + 1], active)
                )

            if redundant:
                values[i, j] = inactive
                changed += 1
    return changed


@numba.njit
def _mark_boundary(
    values,
    active,
    boundary,
    inactive,
    nodata,
    keep_inactive_cells,
    diagonal,
    top,
    bottom,
    left,
    right,
):
    src = values.copy()
    for i in range(top, bottom + 1):
        for j in range(left, right + 1):
            if not equal(src[i, j], active):
                continue
            if i == top or i == bottom or j == left or j == right:
                values[i, j] = boundary
                continue
            for di in range(-1, 2):
                for dj in range(-1, 2):
                    if di == 0 and dj == 0:
                        continue
                    if not diagonal and di != 0 and dj != 0:
                        continue
                    neighbour = src[i + di, j + dj]
                    if equal(neighbour, active) or equal(neighbour, boundary):
                        continue
                    if keep_inactive_cells and (
                        equal(neighbour, inactive) or equal(neighbour, nodata)
                    ):
                        values[i, j] = boundary
                    else:
                        values[i + di, j + dj] = boundary


def create_boundary(
    grid: xr.DataArray,
    active: float,
    boundary: float,
    inactive: float,
    extent: Optional[Extent] = None,
    keep_inactive_cells: bool = False,
    diagonal_check: bool = False,
    nodata: float = np.nan,
) -> xr.DataArray:
    """
    Mark a boundary around the active cells of grid.

    Every cell that neighbours an active cell and is neither active nor
    boundary, becomes a boundary cell. Active cells on the edge of the grid,
    or of extent, become boundary cells as well.

    Parameters
    ----------
    grid: xr.DataArray
        Boundary grid with dims ``("y", "x")``.
    active: float
        Value of the active cells.
    boundary: float
        Value of the boundary cells.
    inactive: float
        Value of the inactive cells.
    extent: Extent, optional
        Only cells within this extent are considered.
    keep_inactive_cells: bool, default False
        When True, inactive and NoData cells are never turned into boundary
        cells: the active cell next to them becomes a boundary cell instead.
    diagonal_check: bool, default False
        When True, diagonal neighbours of active cells become boundary cells
        too.
    nodata: float, default NaN

    Returns
    -------
    xr.DataArray
    """
    spatial.check_dims(grid)
    out = _as_float(grid)
    nrow, ncol = out.shape
    if extent is None:
        top, bottom, left, right = 0, nrow - 1, 0, ncol - 1
    else:
        top, bottom, left, right = _extent_bounds(out, extent)
    if top <= bottom and left <= right:
        _mark_boundary(
            out.values,
            active,
            boundary,
            inactive,
            nodata,
            keep_inactive_cells,
            diagonal_check,
            top,
            bottom,
            left,
            right,
        )
    return out


def correct_outer_cells(
    grid: xr.DataArray,
    active: float,
    boundary: float,
    inactive: float,
    extent: Optional[Extent] = None,
    keep_inactive_cells: bool = False,
    nodata: float = np.nan,
) -> xr.DataArray:
    """
    Inactivate the cells outside the boundary.

    If an extent is given, all cells outside of it are inactivated. Otherwise
    the active cells that can be reached from the edge of the grid without
    crossing a boundary cell are inactivated. Only horizontal and vertical
    steps are taken. When this would inactivate every active cell, the grid
    is returned unchanged.

    Parameters
    ----------
    grid: xr.DataArray
        Boundary grid with dims ``("y", "x")``.
    active: float
    boundary: float
    inactive: float
    extent: Extent, optional
    keep_inactive_cells: bool, default False
        When True, NoData cells outside the extent are kept as NoData.
    nodata: float, default NaN

    Returns
    -------
    xr.DataArray
    """
    spatial.check_dims(grid)
    corrected, _ = _correct_outer_cells(
        grid, active, boundary, inactive, extent, keep_inactive_cells, nodata
    )
    return corrected


def _correct_outer_cells(
    grid, active, boundary, inactive, extent, keep_inactive_cells, nodata
):
    """Returns the corrected grid, and whether it was rolled back."""
    out = _as_float(grid)
    values = out.values

    if extent is not None:
        top, bottom, left, right = _extent_bounds(out, extent)
        outside = np.ones(values.shape, dtype=bool)
        outside[top : bottom + 1, left : right + 1] = False
        if keep_inactive_cells:
            outside &= ~is_nodata(values, nodata)
        values[outside] = inactive
        logger.debug(f"Inactivated {int(outside.sum())} cells outside extent {extent}")
        return out, False

    nvisited = _outer_fill(values, active, boundary, inactive)
    logger.debug(f"Visited {nvisited} cells from the edge of the grid")
    if not (values == active).any():
        logger.debug(
            "Outer cell correction would inactivate all active cells, "
            "restoring the original grid"
        )
        return _as_float(grid), True
    return out, False


def remove_redundant_boundary_cells(
    grid: xr.DataArray,
    active: float,
    boundary: float,
    inactive: float,
    nodata: float = np.nan,
) -> xr.DataArray:
    """
    Inactivate diagonally redundant boundary cells.

    A boundary cell is redundant when its two boundary neighbours already
    separate the active cell in their corner from the inactive (or NoData)
    cells on its other side, or when none of its four neighbours is active.
    The grid is scanned repeatedly until nothing changes.
    """
    spatial.check_dims(grid)
    out = _as_float(grid)
    if _same(boundary, inactive):
        logger.warning(
            "Boundary and inactive value are equal, skipping removal of "
            "redundant boundary cells"
        )
        return out

    npass = 0
    nchanged = 0
    while True:
        changed = _prune_diagonal(out.values, active, boundary, inactive, nodata)
        npass += 1
        nchanged += changed
        if changed == 0:
            break
    logger.debug(f"Removed {nchanged} redundant boundary cells in {npass} passes")
    return out


@standard_log_decorator()
def correct_boundary(
    grid: xr.DataArray,
    active: float,
    boundary: float,
    inactive: float,
    extent: Optional[Extent] = None,
    keep_inactive_cells: bool = False,
    diagonal_check: bool = False,
    outer_correction: bool = True,
    nodata: float = np.nan,
) -> xr.DataArray:
    """
    Correct a boundary grid: inactivate the cells outside of the boundary
    (or extent) and remove diagonally redundant boundary cells.

    The input grid is not modified.

    Parameters
    ----------
    grid: xr.DataArray
        Boundary grid with dims ``("y", "x")``.
    active: float
        Value of the active cells.
    boundary: float
        Value of the boundary cells.
    inactive: float
        Value of the inactive cells.
    extent: Extent, optional
        When given, all cells outside of this extent are inactivated.
        Otherwise, active cells outside of the boundary are inactivated.
    keep_inactive_cells: bool, default False
        Keep existing NoData cells outside of the extent.
    diagonal_check: bool, default False
        The boundary is checked diagonally: boundary cells on diagonals are
        required and are not removed.
    outer_correction: bool, default True
        When False, the grid is returned without corrections. When the outer
        cell correction would inactivate all active cells, the grid is also
        returned without corrections.
    nodata: float, default NaN
        NoData value of grid.

    Returns
    -------
    corrected: xr.DataArray

    Examples
    --------
    Correct an IBOUND grid with boundary value -1:

    >>> corrected = correct_boundary(ibound, active=1.0, boundary=-1.0, inactive=0.0)

    Limit the active area to an extent:

    >>> extent = Extent.parse("184000,352500,200500,371000")
    >>> corrected = correct_boundary(ibound, 1.0, -1.0, 0.0, extent=extent)
    """
    spatial.check_dims(grid)
    _warn_value_collisions(active, boundary, inactive, nodata)
    if not outer_correction:
        return _as_float(grid)

    corrected, rolled_back = _correct_outer_cells(
        grid, active, boundary, inactive, extent, keep_inactive_cells, nodata
    )
    if rolled_back:
        return corrected
    if not diagonal_check:
        corrected = remove_redundant_boundary_cells(
            corrected, active, boundary, inactive, nodata
        )
    return corrected
