from pathlib import Path
from typing import Optional

from pydantic.dataclasses import dataclass

from idftools.common.dataclass_type import _CONFIG, DataclassType
from idftools.common.extent import Extent
from idftools.prepare.resample import ConflictMethod


@dataclass(config=_CONFIG)
class BoundaryOptions(DataclassType):
    """
    Options for :func:`idftools.tools.correct_boundary_files`.

    Parameters
    ----------
    active: float
        Value of the active cells.
    boundary: float
        Value of the boundary cells.
    inactive: float
        Value of the inactive cells.
    extent: Extent, optional
        Grids are enlarged to this extent when needed, and all cells outside
        of it are inactivated.
    keep_inactive_cells: bool, default False
        Keep existing inactive and NoData cells.
    outer_correction: bool, default True
        Inactivate the cells outside of the boundary.
    diagonal_check: bool, default False
        Check the boundary diagonally.
    overwrite: bool, default False
        Overwrite existing output files.

    Examples
    --------
    >>> options = BoundaryOptions(active=1.0, boundary=-1.0, inactive=0.0)
    >>> options = BoundaryOptions(
    >>>     1.0, -1.0, 0.0, extent=Extent.parse("184000,352500,200500,371000")
    >>> )
    """

    active: float
    boundary: float
    inactive: float
    extent: Optional[Extent] = None
    keep_inactive_cells: bool = False
    outer_correction: bool = True
    diagonal_check: bool = False
    overwrite: bool = False


@dataclass(config=_CONFIG)
class ResampleOptions(DataclassType):
    """
    Options for :func:`idftools.tools.resample_files`.

    Parameters
    ----------
    conflict_method: ConflictMethod, default ARITHMETIC_AVERAGE
        Also accepts the number of the method.
    zone_path: Path, optional
        IDF file with zones. Each zone value is resampled individually. The
        results get the extent of the zone file.
    split_by_zone: bool, default False
        Also write the result of each zone to ``<name>_zone<z>.idf``.
    diagonal: bool, default True
        Also grow values to diagonal neighbours.
    output_filename: str, optional
        Name of the output file, instead of ``<name>_resampled.idf``.
    """

    conflict_method: ConflictMethod = ConflictMethod.ARITHMETIC_AVERAGE
    zone_path: Optional[Path] = None
    split_by_zone: bool = False
    diagonal: bool = True
    output_filename: Optional[str] = None
