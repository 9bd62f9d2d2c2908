import numba
import numpy as np

from idftools.typing import BoolArray, FloatArray


def is_nodata(values: FloatArray, nodata: float) -> BoolArray:
    """
    Boolean array marking the NoData cells of ``values``. A NaN ``nodata``
    matches the NaN cells; any other sentinel is compared exactly.
    """
    if np.isnan(nodata):
        return np.isnan(values)
    return values == nodata


@numba.njit
def equal(a, b) -> bool:
    """Exact float comparison for which NaN equals NaN."""
    return a == b or (np.isnan(a) and np.isnan(b))
