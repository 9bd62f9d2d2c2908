import numpy as np
import pytest
import xarray as xr

import idftools.logging
from idftools.logging.backends import NullLogger
from idftools.util import spatial


def _make_grid(values, cellsize=1.0, xmin=0.0, ymin=0.0):
    values = np.asarray(values, dtype=np.float64)
    nrow, ncol = values.shape
    bounds = (xmin, xmin + ncol * cellsize, ymin, ymin + nrow * cellsize)
    coords = spatial._xycoords(bounds, (cellsize, -cellsize))
    return xr.DataArray(values, coords=coords, dims=("y", "x"))


@pytest.fixture(scope="session")
def make_grid():
    """Build a ("y", "x") DataArray from a nested list, row 0 on top."""
    return _make_grid


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    idftools.logging.logger.instance = NullLogger()
