"""
Module to define type aliases.
"""

from typing import TypeAlias

import numpy as np
import xarray as xr
from numpy.typing import NDArray

GridDataArray: TypeAlias = xr.DataArray
GridDataDict: TypeAlias = dict[float, xr.DataArray]
FloatArray: TypeAlias = NDArray[np.floating]
BoolArray: TypeAlias = NDArray[np.bool_]
