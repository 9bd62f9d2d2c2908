import dataclasses

import pytest
import xarray as xr

from idftools.common.extent import Extent
from idftools.util import spatial


def test_extent_parse():
    extent = Extent.parse("184000,352500,200500.5,371000")
    assert extent == Extent(184000.0, 352500.0, 200500.5, 371000.0)
    assert str(extent) == "(184000.0,352500.0,200500.5,371000.0)"


@pytest.mark.parametrize("text", ["1,2,3", "1,2,3,a", ""])
def test_extent_parse__invalid(text):
    with pytest.raises(ValueError):
        Extent.parse(text)


def test_extent_from_grid():
    coords = spatial._xycoords((10.0, 20.0, 5.0, 25.0), (2.5, -5.0))
    da = xr.DataArray([[0.0] * 4] * 4, coords=coords, dims=("y", "x"))
    assert Extent.from_grid(da) == Extent(10.0, 5.0, 20.0, 25.0)


def test_extent_predicates():
    extent = Extent(0.0, 0.0, 10.0, 10.0)
    assert extent.is_valid()
    assert not Extent(1.0, 0.0, 1.0, 10.0).is_valid()
    assert extent.contains(Extent(2.0, 2.0, 8.0, 8.0))
    assert not extent.contains(Extent(2.0, 2.0, 12.0, 8.0))
    assert extent.intersects(Extent(5.0, 5.0, 15.0, 15.0))
    # Touching edges do not intersect.
    assert not extent.intersects(Extent(10.0, 0.0, 20.0, 10.0))


def test_extent_is_frozen():
    extent = Extent(0.0, 0.0, 1.0, 1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        extent.xmin = 2.0
