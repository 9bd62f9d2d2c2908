"""
Utility functions for dealing with the spatial location of rasters:
:func:`idftools.util.spatial.coord_reference`,
:func:`idftools.util.spatial.spatial_reference` and the row and column lookup
functions. Also contains the helpers to bring two grids onto the same extent.
"""

import collections
from typing import Any, Dict, Tuple

import numpy as np
import xarray as xr

from idftools.common.errors import GridMismatchError
from idftools.common.extent import Extent

# Relative tolerance, in cells, used when converting coordinates to indices.
_INDEX_TOLERANCE = 1.0e-6


def _xycoords(bounds, cellsizes) -> Dict[str, Any]:
    """Based on bounds and cellsizes, construct coords with spatial information"""
    # unpack tuples
    xmin, xmax, ymin, ymax = bounds
    dx, dy = cellsizes
    ncol = int(round((xmax - xmin) / abs(dx)))
    nrow = int(round((ymax - ymin) / abs(dy)))
    coords: collections.OrderedDict[str, Any] = collections.OrderedDict()
    coords["x"] = xmin + (np.arange(ncol) + 0.5) * abs(dx)
    coords["y"] = ymax - (np.arange(nrow) + 0.5) * abs(dy)
    coords["dx"] = np.array(float(abs(dx)))
    coords["dy"] = np.array(-float(abs(dy)))
    return coords


def coord_reference(da_coord) -> Tuple[float, float, float]:
    """
    Extracts dx, xmin, xmax for a coordinate DataArray, where x is any coordinate.

    Parameters
    ----------
    da_coord : xarray.DataArray of a coordinate

    Returns
    -------
    tuple
        (dx, xmin, xmax) for a coordinate x
    """
    x = da_coord.values

    dx_string = f"d{da_coord.name}"
    if dx_string in da_coord.coords:
        dx = da_coord.coords[dx_string]
        if dx.size != 1:
            raise ValueError(
                f"DataArray has to be equidistant along {da_coord.name}, "
                f"received an array of cell sizes."
            )
        dx = float(dx)
    elif x.size == 1:
        raise ValueError(
            f"DataArray has size 1 along {da_coord.name}, so cellsize must be provided"
            f" as a coordinate named d{da_coord.name}."
        )
    else:
        dxs = np.diff(x.astype(np.float64))
        dx = float(dxs[0])
        atolx = abs(1.0e-4 * dx)
        if not np.allclose(dxs, dx, atol=atolx):
            raise ValueError(
                f"DataArray has to be equidistant along {da_coord.name}, or cellsizes"
                f" must be provided as a coordinate named d{da_coord.name}."
            )

    # as xarray uses midpoint coordinates
    xmin = float(x.min()) - 0.5 * abs(dx)
    xmax = float(x.max()) + 0.5 * abs(dx)
    return dx, xmin, xmax


def spatial_reference(
    a: xr.DataArray,
) -> Tuple[float, float, float, float, float, float]:
    """
    Extracts spatial reference from DataArray.

    Parameters
    ----------
    a : xarray.DataArray

    Returns
    -------
    tuple
        (dx, xmin, xmax, dy, ymin, ymax)
    """
    dx, xmin, xmax = coord_reference(a["x"])
    dy, ymin, ymax = coord_reference(a["y"])
    return dx, xmin, xmax, dy, ymin, ymax


def empty_2d(
    dx: float,
    xmin: float,
    xmax: float,
    dy: float,
    ymin: float,
    ymax: float,
) -> xr.DataArray:
    """
    Create an empty 2D (y, x) DataArray, filled with NaN.

    Note that xarray uses midpoint coordinates. ``xmin`` and ``xmax`` are used
    to generate the appropriate midpoints.
    """
    bounds = (xmin, xmax, ymin, ymax)
    cellsizes = (np.abs(dx), -np.abs(dy))
    coords = _xycoords(bounds, cellsizes)
    nrow = coords["y"].size
    ncol = coords["x"].size
    return xr.DataArray(
        data=np.full((nrow, ncol), np.nan), coords=coords, dims=["y", "x"]
    )


def grid_extent(da: xr.DataArray) -> Extent:
    """Shorthand for :meth:`idftools.common.extent.Extent.from_grid`."""
    return Extent.from_grid(da)


def check_dims(da: xr.DataArray, name: str = "grid") -> None:
    if not isinstance(da, xr.DataArray):
        raise TypeError(f"{name} must be an xarray.DataArray, got {type(da).__name__}")
    if da.dims != ("y", "x"):
        raise ValueError(f'{name} dims must be ("y", "x"), got {da.dims}')


def row_index(da: xr.DataArray, y: float) -> int:
    """
    Zero based index of the row containing ``y``. A coordinate on the edge
    between two rows belongs to the row below it. May be negative or exceed
    the number of rows for coordinates outside the grid.
    """
    dy, _, ymax = coord_reference(da["y"])
    return int(np.floor((ymax - y) / abs(dy) + _INDEX_TOLERANCE))


def col_index(da: xr.DataArray, x: float) -> int:
    """
    Zero based index of the column containing ``x``. A coordinate on the edge
    between two columns belongs to the column right of it.
    """
    dx, xmin, _ = coord_reference(da["x"])
    return int(np.floor((x - xmin) / abs(dx) + _INDEX_TOLERANCE))


def _offset(a: float, b: float, cellsize: float) -> int:
    """Number of whole cells between two grid lines."""
    n = (a - b) / abs(cellsize)
    rounded = round(n)
    if not np.isclose(n, rounded, atol=_INDEX_TOLERANCE * 100):
        raise GridMismatchError(
            f"Grids are not aligned: {a} and {b} differ by {n} cells of size {abs(cellsize)}"
        )
    return int(rounded)


def _same_cellsize(a: xr.DataArray, b: xr.DataArray) -> bool:
    dxa, _, _, dya, _, _ = spatial_reference(a)
    dxb, _, _, dyb, _, _ = spatial_reference(b)
    return bool(np.isclose(abs(dxa), abs(dxb)) and np.isclose(abs(dya), abs(dyb)))


def check_same_grid(a: xr.DataArray, b: xr.DataArray) -> None:
    """
    Raise a GridMismatchError if ``a`` and ``b`` do not share shape, cell size
    and extent.
    """
    if a.shape != b.shape:
        raise GridMismatchError(f"Shapes of grids differ: {a.shape} and {b.shape}")
    if not _same_cellsize(a, b):
        dxa, _, _, dya, _, _ = spatial_reference(a)
        dxb, _, _, dyb, _, _ = spatial_reference(b)
        raise GridMismatchError(
            f"Cellsizes of grids differ: ({abs(dxa)}x{abs(dya)}) and ({abs(dxb)}x{abs(dyb)})"
        )
    extent_a = Extent.from_grid(a)
    extent_b = Extent.from_grid(b)
    if not np.allclose(
        [extent_a.xmin, extent_a.ymin, extent_a.xmax, extent_a.ymax],
        [extent_b.xmin, extent_b.ymin, extent_b.xmax, extent_b.ymax],
    ):
        raise GridMismatchError(f"Extents of grids differ: {extent_a} and {extent_b}")


def _paste(da: xr.DataArray, target: xr.DataArray) -> xr.DataArray:
    """
    Copy the values of ``da`` into the overlapping cells of ``target``, which
    must have the same cell size and be aligned with ``da``.
    """
    dx, xmin, _, dy, _, ymax = spatial_reference(da)
    _, target_xmin, _, _, _, target_ymax = spatial_reference(target)
    row_offset = _offset(target_ymax, ymax, dy)
    col_offset = _offset(xmin, target_xmin, dx)

    nrow, ncol = da.shape
    target_nrow, target_ncol = target.shape
    # Rows and columns of da in target index space, clipped to target
    r0 = max(row_offset, 0)
    r1 = min(row_offset + nrow, target_nrow)
    c0 = max(col_offset, 0)
    c1 = min(col_offset + ncol, target_ncol)

    out = target.copy()
    if r0 < r1 and c0 < c1:
        out.values[r0:r1, c0:c1] = da.values[
            r0 - row_offset : r1 - row_offset, c0 - col_offset : c1 - col_offset
        ]
    return out


def enlarge(da: xr.DataArray, extent: Extent) -> xr.DataArray:
    """
    Enlarge ``da`` so that it covers ``extent``. The new extent is snapped
    outward to the cell boundaries of ``da``; added cells are NaN. Returns
    ``da`` itself when it already contains ``extent``.
    """
    check_dims(da)
    current = Extent.from_grid(da)
    if current.contains(extent):
        return da

    dx, xmin, xmax, dy, ymin, ymax = spatial_reference(da)
    dx = abs(dx)
    dy = abs(dy)
    new_xmin = xmin - np.ceil(max(xmin - extent.xmin, 0.0) / dx - _INDEX_TOLERANCE) * dx
    new_xmax = xmax + np.ceil(max(extent.xmax - xmax, 0.0) / dx - _INDEX_TOLERANCE) * dx
    new_ymin = ymin - np.ceil(max(ymin - extent.ymin, 0.0) / dy - _INDEX_TOLERANCE) * dy
    new_ymax = ymax + np.ceil(max(extent.ymax - ymax, 0.0) / dy - _INDEX_TOLERANCE) * dy

    target = empty_2d(dx, new_xmin, new_xmax, dy, new_ymin, new_ymax)
    if np.issubdtype(da.dtype, np.floating):
        target = target.astype(da.dtype)
    out = _paste(da, target)
    out.name = da.name
    out.attrs.update(da.attrs)
    return out


def align_like(da: xr.DataArray, like: xr.DataArray) -> xr.DataArray:
    """
    Clip and enlarge ``da`` to the grid of ``like``. Cells of ``like`` not
    covered by ``da`` become NaN.

    Raises
    ------
    GridMismatchError
        When the cell sizes differ, the grids are not aligned, or the extents
        do not overlap.
    """
    check_dims(da, "da")
    check_dims(like, "like")
    if not _same_cellsize(da, like):
        dxa, _, _, dya, _, _ = spatial_reference(da)
        dxb, _, _, dyb, _, _ = spatial_reference(like)
        raise GridMismatchError(
            f"Cellsizes are different for grid ({abs(dxb)}x{abs(dyb)}) "
            f"and aligned grid ({abs(dxa)}x{abs(dya)})"
        )
    extent = Extent.from_grid(da)
    like_extent = Extent.from_grid(like)
    if not like_extent.intersects(extent):
        raise GridMismatchError(
            f"No overlap between extents of grid {like_extent} and aligned grid {extent}"
        )

    target = xr.full_like(like, np.nan, dtype=np.float64)
    out = _paste(da.astype(np.float64), target)
    out.name = da.name
    out.attrs.update(da.attrs)
    return out
