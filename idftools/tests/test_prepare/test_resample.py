import numpy as np
import pytest
import xarray as xr
from pytest_cases import parametrize_with_cases

from idftools.common.errors import GridMismatchError
from idftools.prepare.resample import (
    ConflictMethod,
    full_zone,
    resample_nearest_neighbour,
    resample_zone,
    split_zones,
)

N = np.nan


class ConflictCases:
    def case_arithmetic(self):
        return ConflictMethod.ARITHMETIC_AVERAGE, 4.0

    def case_harmonic(self):
        return ConflictMethod.HARMONIC_AVERAGE, 3.0

    def case_minimum(self):
        return ConflictMethod.MINIMUM_VALUE, 2.0

    def case_maximum(self):
        return ConflictMethod.MAXIMUM_VALUE, 6.0


@pytest.mark.parametrize("conflict_method", list(ConflictMethod))
def test_resample_zone__single_seed(make_grid, conflict_method):
    # Arrange
    values = make_grid(
        [
            [N, N, N],
            [N, 10.0, N],
            [N, N, N],
        ]
    )
    mask = full_zone(values)

    # Act
    resampled, rounds = resample_zone(values, mask, conflict_method)

    # Assert
    assert rounds == 1
    np.testing.assert_array_equal(resampled.values, np.full((3, 3), 10.0))


@parametrize_with_cases("conflict_case", cases=ConflictCases)
def test_resample_zone__conflict(make_grid, conflict_case):
    # Arrange
    conflict_method, expected = conflict_case
    values = make_grid([[2.0, N, 6.0]])

    # Act
    resampled, rounds = resample_zone(values, full_zone(values), conflict_method)

    # Assert
    assert rounds == 1
    np.testing.assert_allclose(resampled.values, [[2.0, expected, 6.0]])


@pytest.mark.parametrize(
    ("neighbours", "expected"),
    [([0.0, N], 0.0), ([0.0, N, 4.0], 0.0), ([2.0, N, -2.0], 0.0)],
)
def test_resample_zone__harmonic_undefined(make_grid, neighbours, expected):
    # Arrange
    values = make_grid([neighbours])

    # Act
    resampled, _ = resample_zone(
        values, full_zone(values), ConflictMethod.HARMONIC_AVERAGE
    )

    # Assert
    assert resampled.values[0, 1] == expected


@pytest.mark.parametrize("conflict_method", list(ConflictMethod))
@pytest.mark.parametrize("diagonal", [True, False])
def test_resample_zone__fills_zone(make_grid, conflict_method, diagonal):
    # Arrange
    rng = np.random.default_rng(seed=0)
    data = np.full((8, 12), N)
    data[rng.integers(0, 8, 4), rng.integers(0, 12, 4)] = rng.uniform(1.0, 5.0, 4)
    values = make_grid(data)

    # Act
    resampled, rounds = resample_zone(
        values, full_zone(values), conflict_method, diagonal=diagonal
    )

    # Assert
    assert not np.isnan(resampled.values).any()
    if diagonal:
        assert rounds <= max(values.shape)
    # Known values are never changed.
    known = ~np.isnan(data)
    np.testing.assert_array_equal(resampled.values[known], data[known])


def test_resample_zone__rounds_grow_ring_by_ring(make_grid):
    # Arrange
    data = np.full((1, 6), N)
    data[0, 0] = 1.0
    data[0, 5] = 7.0
    values = make_grid(data)

    # Act
    resampled, rounds = resample_zone(
        values, full_zone(values), ConflictMethod.ARITHMETIC_AVERAGE
    )

    # Assert
    # Both ends grow at the same pace, the middle cells do not see each other
    # within a single round.
    assert rounds == 2
    np.testing.assert_allclose(resampled.values, [[1.0, 1.0, 1.0, 7.0, 7.0, 7.0]])


def test_resample_zone__without_diagonal(make_grid):
    # Arrange
    values = make_grid(
        [
            [N, N, N],
            [N, 10.0, N],
            [N, N, N],
        ]
    )

    # Act
    resampled, rounds = resample_zone(
        values, full_zone(values), ConflictMethod.ARITHMETIC_AVERAGE, diagonal=False
    )

    # Assert
    assert rounds == 2
    assert not np.isnan(resampled.values).any()


def test_resample_zone__mask_limits_growth(make_grid):
    # Arrange
    values = make_grid([[1.0, N, N, N]])
    mask = make_grid([[1, 1, 0, 1]]) == 1

    # Act
    resampled, _ = resample_zone(values, mask, ConflictMethod.ARITHMETIC_AVERAGE)

    # Assert
    np.testing.assert_array_equal(resampled.values, [[1.0, 1.0, N, N]])


def test_resample_zone__sentinel_nodata(make_grid):
    # Arrange
    nodata = -9999.0
    values = make_grid([[2.0, nodata, nodata]])

    # Act
    resampled, _ = resample_zone(
        values, full_zone(values), ConflictMethod.ARITHMETIC_AVERAGE, nodata=nodata
    )

    # Assert
    np.testing.assert_array_equal(resampled.values, [[2.0, 2.0, 2.0]])


def test_resample_zone__without_seed(make_grid):
    # Arrange
    values = make_grid(np.full((3, 3), N))

    # Act
    resampled, rounds = resample_zone(
        values, full_zone(values), ConflictMethod.ARITHMETIC_AVERAGE
    )

    # Assert
    assert rounds == 0
    assert np.isnan(resampled.values).all()


def test_split_zones(make_grid):
    # Arrange
    zones = make_grid(
        [
            [3.0, 3.0, 1.0],
            [N, 2.0, 1.0],
        ]
    )

    # Act
    masks = split_zones(zones)

    # Assert
    assert list(masks.keys()) == [1.0, 2.0, 3.0]
    np.testing.assert_array_equal(masks[1.0].values, [[False, False, True], [False, False, True]])
    np.testing.assert_array_equal(masks[3.0].values, [[True, True, False], [False, False, False]])
    assert all(mask.dtype == bool for mask in masks.values())


def test_split_zones__sentinel_nodata(make_grid):
    # Arrange
    zones = make_grid([[-1.0, 5.0, 5.0]])

    # Act
    masks = split_zones(zones, nodata=-1.0)

    # Assert
    assert list(masks.keys()) == [5.0]


def test_resample_nearest_neighbour__zones(make_grid):
    # Arrange
    values = make_grid(
        [
            [1.0, N, N, N],
            [N, N, N, 9.0],
        ]
    )
    zones = make_grid(
        [
            [1.0, 1.0, 2.0, 2.0],
            [1.0, 1.0, 2.0, N],
        ]
    )

    # Act
    resampled = resample_nearest_neighbour(values, zones)

    # Assert
    expected = np.array(
        [
            [1.0, 1.0, N, N],
            [1.0, 1.0, N, N],
        ]
    )
    # Zone 2 has no value inside of it: 9.0 lies outside all zones.
    np.testing.assert_array_equal(resampled.values, expected)


def test_resample_nearest_neighbour__values_do_not_cross_zones(make_grid):
    # Arrange
    values = make_grid([[1.0, N, N, 5.0]])
    zones = make_grid([[1.0, 1.0, 2.0, 2.0]])

    # Act
    resampled = resample_nearest_neighbour(values, zones)

    # Assert
    np.testing.assert_array_equal(resampled.values, [[1.0, 1.0, 5.0, 5.0]])


def test_resample_nearest_neighbour__without_zones(make_grid):
    # Arrange
    values = make_grid([[1.0, N, 3.0]])

    # Act
    resampled = resample_nearest_neighbour(values)

    # Assert
    np.testing.assert_array_equal(resampled.values, [[1.0, 2.0, 3.0]])
    assert resampled.dims == ("y", "x")
    np.testing.assert_array_equal(resampled["x"].values, values["x"].values)


def test_resample_nearest_neighbour__later_zone_wins(make_grid):
    # Arrange
    values = make_grid([[1.0, N, 5.0]])
    first = make_grid([[1, 1, 0]]) == 1
    second = make_grid([[0, 1, 1]]) == 1

    # Act
    resampled = resample_nearest_neighbour(values, [first, second])

    # Assert
    np.testing.assert_array_equal(resampled.values, [[1.0, 5.0, 5.0]])


def test_resample_nearest_neighbour__zone_callback(make_grid):
    # Arrange
    values = make_grid([[1.0, N, N, 5.0]])
    zones = make_grid([[2.0, 2.0, 7.0, 7.0]])
    calls = []

    def callback(zone_value, zone_result):
        calls.append((zone_value, zone_result.values.copy()))

    # Act
    resample_nearest_neighbour(values, zones, zone_callback=callback)

    # Assert
    assert [zone for zone, _ in calls] == [2.0, 7.0]
    np.testing.assert_array_equal(calls[0][1], [[1.0, 1.0, N, N]])
    np.testing.assert_array_equal(calls[1][1], [[N, N, 5.0, 5.0]])


def test_resample_nearest_neighbour__input_not_mutated(make_grid):
    # Arrange
    values = make_grid([[1.0, N, 3.0]])

    # Act
    resample_nearest_neighbour(values)

    # Assert
    assert np.isnan(values.values[0, 1])


def test_resample_nearest_neighbour__grid_mismatch(make_grid):
    # Arrange
    values = make_grid(np.full((3, 3), 1.0))
    zones = make_grid(np.full((3, 3), 1.0), cellsize=2.0)

    # Act/Assert
    with pytest.raises(GridMismatchError):
        resample_nearest_neighbour(values, zones)


def test_resample_nearest_neighbour__extent_mismatch(make_grid):
    # Arrange
    values = make_grid(np.full((3, 3), 1.0))
    zones = make_grid(np.full((3, 3), 1.0), xmin=10.0)

    # Act/Assert
    with pytest.raises(GridMismatchError, match="Extents"):
        resample_nearest_neighbour(values, zones)


def test_resample_nearest_neighbour__invalid_zones(make_grid):
    values = make_grid(np.full((3, 3), 1.0))
    with pytest.raises(TypeError):
        resample_nearest_neighbour(values, zones=1.0)


def test_conflict_method_from_number():
    assert ConflictMethod.from_number(2) == ConflictMethod.HARMONIC_AVERAGE
    with pytest.raises(ValueError, match="Invalid conflict method"):
        ConflictMethod.from_number(5)


def test_full_zone(make_grid):
    values = make_grid(np.full((2, 3), N))
    mask = full_zone(values)
    assert mask.dtype == bool
    assert mask.all()
    assert isinstance(mask, xr.DataArray)
