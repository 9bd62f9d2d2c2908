"""
Resample values to zone statistics: every zone cell gets a statistic of the
values in its zone, or in its neighbourhood within the zone.
"""

from enum import Enum
from typing import Optional

import numba
import numpy as np
import pandas as pd
import xarray as xr

from idftools.logging import logger
from idftools.logging.logging_decorators import standard_log_decorator
from idftools.typing import GridDataArray
from idftools.util import spatial
from idftools.util.structured import is_nodata


class ZoneStatistic(Enum):
    MINIMUM = 1
    MAXIMUM = 2
    MEAN = 3
    PERCENTILE = 4


@numba.njit
def _window_statistic(values, zones, distance, statistic, percentile, out):
    nrow, ncol = values.shape
    buffer = np.empty((2 * distance + 1) ** 2)
    for i in range(nrow):
        for j in range(ncol):
            zone = zones[i, j]
            if np.isnan(zone):
                continue
            n = 0
            for ii in range(max(i - distance, 0), min(i + distance + 1, nrow)):
                for jj in range(max(j - distance, 0), min(j + distance + 1, ncol)):
                    v = values[ii, jj]
                    if zones[ii, jj] == zone and not np.isnan(v):
                        buffer[n] = v
                        n += 1
            if n == 0:
                continue
            window = buffer[:n]
            if statistic == 1:
                out[i, j] = window.min()
            elif statistic == 2:
                out[i, j] = window.max()
            elif statistic == 3:
                out[i, j] = window.mean()
            else:
                out[i, j] = np.percentile(window, percentile)


def _zone_statistic(
    values: np.ndarray,
    zones: np.ndarray,
    statistic: ZoneStatistic,
    percentile: Optional[float],
) -> np.ndarray:
    in_zone = ~np.isnan(zones)
    df = pd.DataFrame({"zone": zones[in_zone], "value": values[in_zone]})
    grouped = df.dropna(subset=["value"]).groupby("zone")["value"]
    match statistic:
        case ZoneStatistic.MINIMUM:
            per_zone = grouped.min()
        case ZoneStatistic.MAXIMUM:
            per_zone = grouped.max()
        case ZoneStatistic.MEAN:
            per_zone = grouped.mean()
        case ZoneStatistic.PERCENTILE:
            per_zone = grouped.quantile(percentile / 100.0)
    logger.debug(f"Computed {statistic.name.lower()} for {per_zone.size} zones")

    out = np.full(values.shape, np.nan)
    out[in_zone] = df["zone"].map(per_zone).to_numpy(dtype=np.float64)
    return out


@standard_log_decorator()
def resample_zone_statistic(
    values: GridDataArray,
    zones: GridDataArray,
    statistic: ZoneStatistic,
    percentile: Optional[float] = None,
    distance: int = 0,
    nodata: float = np.nan,
) -> GridDataArray:
    """
    Assign a statistic of the values within a zone to every cell of that zone.

    Parameters
    ----------
    values: xr.DataArray
        Grid with dims ``("y", "x")``.
    zones: xr.DataArray
        Zone grid on the same grid as values. NoData cells belong to no zone.
    statistic: ZoneStatistic
    percentile: float, optional
        Percentile in the range [0, 100]. Required for
        ``ZoneStatistic.PERCENTILE``. Percentiles are linearly interpolated.
    distance: int, default 0
        When 0, the statistic is computed over the full zone. Otherwise over
        the cells of the same zone within a square window of ``distance``
        cells around each cell.
    nodata: float, default NaN
        NoData value of both values and zones.

    Returns
    -------
    xr.DataArray
        Statistic per zone cell. Cells outside of zones, and zone cells
        without any values to compute a statistic from, are NoData.
    """
    spatial.check_dims(values, "values")
    spatial.check_dims(zones, "zones")
    if not isinstance(statistic, ZoneStatistic):
        raise TypeError(
            f"statistic must be a ZoneStatistic, got {type(statistic).__name__}"
        )
    if statistic == ZoneStatistic.PERCENTILE:
        if percentile is None or not (0.0 <= percentile <= 100.0):
            raise ValueError(
                f"percentile should be in the range [0, 100], got {percentile}"
            )
    if distance < 0:
        raise ValueError(f"distance should be zero or positive, got {distance}")
    spatial.check_same_grid(values, zones)

    v = values.values.astype(np.float64)
    v[is_nodata(v, nodata)] = np.nan
    z = zones.values.astype(np.float64)
    z[is_nodata(z, nodata)] = np.nan

    if distance == 0:
        out = _zone_statistic(v, z, statistic, percentile)
    else:
        out = np.full(v.shape, np.nan)
        q = 0.0 if percentile is None else float(percentile)
        _window_statistic(v, z, int(distance), statistic.value, q, out)

    if not np.isnan(nodata):
        out[np.isnan(out)] = nodata
    return xr.DataArray(out, coords=values.coords, dims=values.dims, name=values.name)
