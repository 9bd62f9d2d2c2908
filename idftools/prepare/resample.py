"""
Nearest neighbour resampling: fill the NoData cells of a sparse value grid by
growing the known values outward, one ring of cells per round, within zones.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

import numba
import numpy as np
import xarray as xr

from idftools.logging import logger
from idftools.logging.logging_decorators import standard_log_decorator
from idftools.typing import GridDataArray, GridDataDict
from idftools.util import spatial
from idftools.util.structured import equal, is_nodata


class ConflictMethod(Enum):
    """
    Method to compute the value of a cell from its resolved neighbours.

    * ``ARITHMETIC_AVERAGE``: mean of the neighbour values.
    * ``HARMONIC_AVERAGE``: harmonic mean of the neighbour values. When any of
      the neighbour values is 0, or when their reciprocals sum to 0 (e.g. 2
      and -2), the result is 0.
    * ``MINIMUM_VALUE``: smallest neighbour value.
    * ``MAXIMUM_VALUE``: largest neighbour value.
    """

    ARITHMETIC_AVERAGE = 1
    HARMONIC_AVERAGE = 2
    MINIMUM_VALUE = 3
    MAXIMUM_VALUE = 4

    @classmethod
    def from_number(cls, number: int) -> "ConflictMethod":
        try:
            return cls(number)
        except ValueError as e:
            options = ", ".join(f"{m.value} ({m.name})" for m in cls)
            raise ValueError(
                f"Invalid conflict method: {number}. Choose from: {options}"
            ) from e


# numba compiles against plain integers
_ARITHMETIC_AVERAGE = ConflictMethod.ARITHMETIC_AVERAGE.value
_HARMONIC_AVERAGE = ConflictMethod.HARMONIC_AVERAGE.value
_MINIMUM_VALUE = ConflictMethod.MINIMUM_VALUE.value
_MAXIMUM_VALUE = ConflictMethod.MAXIMUM_VALUE.value


@numba.njit
def _resample_round(current, mask, nodata, method, diagonal, out):
    """
    Resolve the NoData cells within mask that border a resolved cell in
    current. Reads current only, writes out. Returns the number of resolved
    cells.
    """
    nrow, ncol = current.shape
    nresolved = 0
    for i in range(nrow):
        for j in range(ncol):
            out[i, j] = current[i, j]
            if not mask[i, j] or not equal(current[i, j], nodata):
                continue

            n = 0
            total = 0.0
            has_zero = False
            extreme = 0.0
            for di in range(-1, 2):
                for dj in range(-1, 2):
                    if di == 0 and dj == 0:
                        continue
                    if not diagonal and di != 0 and dj != 0:
                        continue
                    ii = i + di
                    jj = j + dj
                    if ii < 0 or ii >= nrow or jj < 0 or jj >= ncol:
                        continue
                    v = current[ii, jj]
                    if equal(v, nodata):
                        continue

                    if method == _ARITHMETIC_AVERAGE:
                        total += v
                    elif method == _HARMONIC_AVERAGE:
                        if v == 0.0:
                            has_zero = True
                        else:
                            total += 1.0 / v
                    elif method == _MINIMUM_VALUE:
                        if n == 0 or v < extreme:
                            extreme = v
                    elif method == _MAXIMUM_VALUE:
                        if n == 0 or v > extreme:
                            extreme = v
                    n += 1

            if n == 0:
                continue
            if method == _ARITHMETIC_AVERAGE:
                out[i, j] = total / n
            elif method == _HARMONIC_AVERAGE:
                # undefined when the reciprocals cancel out
                if has_zero or total == 0.0:
                    out[i, j] = 0.0
                else:
                    out[i, j] = n / total
            else:
                out[i, j] = extreme
            nresolved += 1
    return nresolved


def _as_mask(mask: xr.DataArray) -> np.ndarray:
    if mask.dtype == bool:
        return mask.values
    return mask.values == 1


def _as_values(values: xr.DataArray, nodata: float) -> np.ndarray:
    """Float64 copy of values, with NaN replaced by nodata."""
    a = values.values.astype(np.float64)
    if not np.isnan(nodata):
        a[np.isnan(a)] = nodata
    return a


def split_zones(zones: GridDataArray, nodata: float = np.nan) -> GridDataDict:
    """
    Split a zone grid into one boolean mask per unique zone value.

    Parameters
    ----------
    zones: xr.DataArray
        Grid with dims ``("y", "x")`` holding a zone number per cell.
    nodata: float, default NaN
        Cells with this value (or NaN) do not belong to any zone.

    Returns
    -------
    dict
        Masks, with the zone value as key, sorted by zone value.
    """
    spatial.check_dims(zones, "zones")
    values = zones.values
    valid = ~is_nodata(values, nodata) & ~np.isnan(values)
    unique = np.unique(values[valid])
    return {float(zone): (zones == zone) for zone in unique}


def full_zone(like: GridDataArray) -> GridDataArray:
    """A single mask covering the full grid."""
    return xr.ones_like(like, dtype=bool)


def resample_zone(
    values: GridDataArray,
    mask: GridDataArray,
    conflict_method: ConflictMethod = ConflictMethod.ARITHMETIC_AVERAGE,
    diagonal: bool = True,
    nodata: float = np.nan,
) -> Tuple[GridDataArray, int]:
    """
    Fill the NoData cells within a zone from their nearest known neighbours.

    Cells are resolved in rounds. Each round, every unresolved zone cell that
    borders at least one resolved cell gets a value computed from those
    neighbours, with ``conflict_method``. A round only sees the values of the
    previous round, so the known values grow outward ring by ring.

    Parameters
    ----------
    values: xr.DataArray
        Grid with known values and NoData elsewhere.
    mask: xr.DataArray
        Boolean grid (or 1 for cells in zone) on the same grid as values.
    conflict_method: ConflictMethod
    diagonal: bool, default True
        Also grow to diagonal neighbours.
    nodata: float, default NaN

    Returns
    -------
    resampled: xr.DataArray
        Values within the zone, NoData outside of it.
    rounds: int
        Number of rounds in which cells were resolved.
    """
    spatial.check_dims(values, "values")
    spatial.check_dims(mask, "mask")
    spatial.check_same_grid(values, mask)

    zone = _as_mask(mask)
    current = np.where(zone, _as_values(values, nodata), nodata)
    nxt = np.empty_like(current)
    method = conflict_method.value

    rounds = 0
    while True:
        nresolved = _resample_round(current, zone, nodata, method, diagonal, nxt)
        if nresolved == 0:
            break
        rounds += 1
        current, nxt = nxt, current

    nunresolved = int((zone & is_nodata(current, nodata)).sum())
    if nunresolved > 0:
        logger.debug(f"{nunresolved} cells in zone could not be reached from a value")
    logger.debug(f"Resolved zone in {rounds} rounds")

    resampled = xr.DataArray(current, coords=values.coords, dims=values.dims)
    return resampled, rounds


def _zone_masks(
    values: GridDataArray,
    zones: Union[None, GridDataArray, List[GridDataArray], GridDataDict],
    nodata: float,
) -> Dict[float, GridDataArray]:
    if zones is None:
        return {1.0: full_zone(values)}
    if isinstance(zones, xr.DataArray):
        if zones.dtype == bool:
            return {1.0: zones}
        return split_zones(zones, nodata)
    if isinstance(zones, dict):
        return dict(zones)
    if isinstance(zones, (list, tuple)):
        return {float(i): mask for i, mask in enumerate(zones, start=1)}
    raise TypeError(
        f"zones must be None, a DataArray, a list or a dict, got {type(zones).__name__}"
    )


@standard_log_decorator()
def resample_nearest_neighbour(
    values: GridDataArray,
    zones: Union[None, GridDataArray, List[GridDataArray], GridDataDict] = None,
    conflict_method: ConflictMethod = ConflictMethod.ARITHMETIC_AVERAGE,
    diagonal: bool = True,
    nodata: float = np.nan,
    zone_callback: Optional[Callable[[float, GridDataArray], None]] = None,
) -> GridDataArray:
    """
    Fill the NoData cells of a grid with the values of their nearest
    neighbours, zone by zone.

    Values never spread from one zone to another. Zones are processed in
    order and later zones overwrite earlier ones where they overlap. Cells
    outside of all zones are NoData.

    Parameters
    ----------
    values: xr.DataArray
        Grid with dims ``("y", "x")``, with known values and NoData elsewhere.
    zones: optional
        * None: the full grid is a single zone.
        * xr.DataArray: zone grid, split into one zone per unique value. A
          boolean DataArray is used as a single mask.
        * list of masks, or dict of zone value to mask.
    conflict_method: ConflictMethod, default ARITHMETIC_AVERAGE
        How a cell value is computed from multiple resolved neighbours.
    diagonal: bool, default True
        Also grow to diagonal neighbours.
    nodata: float, default NaN
    zone_callback: callable, optional
        Called with the zone value and the resampled grid of each zone.

    Returns
    -------
    resampled: xr.DataArray

    Examples
    --------
    Fill a grid of measured heads within the zones of a model:

    >>> filled = resample_nearest_neighbour(
    >>>     heads, zones, conflict_method=ConflictMethod.HARMONIC_AVERAGE
    >>> )
    """
    spatial.check_dims(values, "values")
    masks = _zone_masks(values, zones, nodata)
    for mask in masks.values():
        spatial.check_dims(mask, "mask")
        spatial.check_same_grid(values, mask)
    logger.debug(f"Resampling {len(masks)} zones")

    result = np.full(values.shape, nodata, dtype=np.float64)
    for zone_value, mask in masks.items():
        zone_result, _ = resample_zone(values, mask, conflict_method, diagonal, nodata)
        zone_values = zone_result.values
        resolved = ~is_nodata(zone_values, nodata)
        result[resolved] = zone_values[resolved]
        if zone_callback is not None:
            zone_callback(zone_value, zone_result)

    return xr.DataArray(result, coords=values.coords, dims=values.dims, name=values.name)
