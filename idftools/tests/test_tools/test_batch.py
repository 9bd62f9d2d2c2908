import numpy as np
import pytest
from pydantic import ValidationError

from idftools import idf
from idftools.common.errors import GridMismatchError
from idftools.common.extent import Extent
from idftools.prepare import ConflictMethod
from idftools.tools import (
    BoundaryOptions,
    FileResult,
    ResampleOptions,
    correct_boundary_files,
    resample_files,
)

A = 1.0
B = -1.0
I = 0.0  # noqa: E741
N = np.nan


@pytest.fixture(scope="function")
def bnd_dir(tmp_path, make_grid):
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    grid = make_grid(
        [
            [I, I, I, I, I],
            [I, A, A, A, I],
            [I, A, A, A, I],
            [I, A, A, A, I],
            [I, I, I, I, I],
        ]
    )
    idf.write(input_dir / "bnd_l1.idf", grid)
    idf.write(input_dir / "bnd_l2.idf", grid)
    (input_dir / "bnd_notes.txt").write_text("not a grid")
    return input_dir


@pytest.fixture(scope="function")
def options():
    return BoundaryOptions(active=A, boundary=B, inactive=I)


def test_correct_boundary_files(bnd_dir, tmp_path, options):
    # Arrange
    output_dir = tmp_path / "output"

    # Act
    results = correct_boundary_files(bnd_dir, "bnd_*", output_dir, options)

    # Assert
    assert [r.path.name for r in results] == ["bnd_l1.idf", "bnd_l2.idf"]
    assert all(r.ok for r in results)
    expected = np.array(
        [
            [I, B, B, B, I],
            [B, A, A, A, B],
            [B, A, A, A, B],
            [B, A, A, A, B],
            [I, B, B, B, I],
        ]
    )
    for result in results:
        assert result.output_path == output_dir / result.path.name
        np.testing.assert_array_equal(idf.open(result.output_path).values, expected)


def test_correct_boundary_files__skip_existing(bnd_dir, tmp_path, options):
    # Arrange
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    existing = output_dir / "bnd_l1.idf"
    existing.write_bytes(b"existing")

    # Act
    results = correct_boundary_files(bnd_dir, "bnd_*.idf", output_dir, options)

    # Assert
    assert results[0].output_path is None
    assert results[0].ok
    assert existing.read_bytes() == b"existing"
    assert results[1].output_path == output_dir / "bnd_l2.idf"


def test_correct_boundary_files__overwrite(bnd_dir, tmp_path):
    # Arrange
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    existing = output_dir / "bnd_l1.idf"
    existing.write_bytes(b"existing")
    options = BoundaryOptions(active=A, boundary=B, inactive=I, overwrite=True)

    # Act
    results = correct_boundary_files(bnd_dir, "bnd_*.idf", output_dir, options)

    # Assert
    assert results[0].output_path == existing
    assert idf.open(existing).shape == (5, 5)


def test_correct_boundary_files__extent(tmp_path, make_grid):
    # Arrange
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    idf.write(input_dir / "bnd.idf", make_grid(np.full((3, 3), A)))
    extent = Extent(-1.0, -1.0, 4.0, 4.0)
    options = BoundaryOptions(active=A, boundary=B, inactive=I, extent=extent)

    # Act
    results = correct_boundary_files(input_dir, "*.idf", tmp_path / "output", options)

    # Assert
    corrected = idf.open(results[0].output_path)
    assert Extent.from_grid(corrected) == extent
    expected = np.array(
        [
            [N, B, B, B, N],
            [B, A, A, A, B],
            [B, A, A, A, B],
            [B, A, A, A, B],
            [N, B, B, B, N],
        ]
    )
    np.testing.assert_array_equal(corrected.values, expected)


def test_correct_boundary_files__failure_does_not_stop_batch(
    bnd_dir, tmp_path, options
):
    # Arrange
    (bnd_dir / "bnd_l0.idf").write_bytes(b"\x00" * 64)

    # Act
    results = correct_boundary_files(bnd_dir, "bnd_*.idf", tmp_path / "out", options)

    # Assert
    assert len(results) == 3
    assert isinstance(results[0].error, ValueError)
    assert results[0].output_path is None
    assert all(r.ok for r in results[1:])


def test_correct_boundary_files__no_match(bnd_dir, tmp_path, options):
    with pytest.raises(FileNotFoundError, match="No IDF files found"):
        correct_boundary_files(bnd_dir, "kh_*.idf", tmp_path / "out", options)


def test_boundary_options__forbids_extra():
    with pytest.raises((TypeError, ValidationError)):
        BoundaryOptions(active=A, boundary=B, inactive=I, diagonal=True)


@pytest.fixture(scope="function")
def resample_dir(tmp_path, make_grid):
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    zones = make_grid(
        [
            [1.0, 1.0, 2.0, 2.0],
            [1.0, 1.0, 2.0, 2.0],
            [1.0, 1.0, 2.0, 2.0],
        ]
    )
    values = make_grid(
        [
            [5.0, N, N, N],
            [N, N, N, N],
            [N, N, N, 8.0],
        ]
    )
    idf.write(tmp_path / "zones.idf", zones)
    # Different cell size than the zone grid
    idf.write(input_dir / "kh_1.idf", make_grid(np.ones((3, 4)), cellsize=2.0))
    idf.write(input_dir / "kh_2.idf", values)
    return input_dir


def test_resample_files(resample_dir, tmp_path):
    # Arrange
    output_dir = tmp_path / "output"
    options = ResampleOptions(zone_path=tmp_path / "zones.idf", split_by_zone=True)

    # Act
    results = resample_files(resample_dir, "kh_*.idf", output_dir, options)

    # Assert
    assert isinstance(results[0], FileResult)
    assert isinstance(results[0].error, GridMismatchError)
    assert not (output_dir / "kh_1_resampled.idf").exists()

    assert results[1].ok
    assert results[1].output_path == output_dir / "kh_2_resampled.idf"
    resampled = idf.open(results[1].output_path)
    expected = np.array(
        [
            [5.0, 5.0, 8.0, 8.0],
            [5.0, 5.0, 8.0, 8.0],
            [5.0, 5.0, 8.0, 8.0],
        ]
    )
    np.testing.assert_array_equal(resampled.values, expected)

    zone1 = idf.open(output_dir / "kh_2_zone1.idf")
    zone2 = idf.open(output_dir / "kh_2_zone2.idf")
    assert np.isnan(zone1.values[:, 2:]).all()
    assert (zone1.values[:, :2] == 5.0).all()
    assert (zone2.values[:, 2:] == 8.0).all()


def test_resample_files__without_zones(resample_dir, tmp_path):
    # Arrange
    options = ResampleOptions(
        conflict_method=ConflictMethod.MAXIMUM_VALUE, output_filename="kh_filled.idf"
    )

    # Act
    results = resample_files(resample_dir, "kh_2.idf", tmp_path / "out", options)

    # Assert
    resampled = idf.open(results[0].output_path)
    assert results[0].output_path.name == "kh_filled.idf"
    assert not np.isnan(resampled.values).any()
    assert resampled.values[1, 1] == 5.0
    assert resampled.values[1, 2] == 8.0


def test_resample_options__conflict_method_number():
    options = ResampleOptions(conflict_method=2)
    assert options.conflict_method == ConflictMethod.HARMONIC_AVERAGE
