"""
Batch nearest neighbour resampling of IDF files.
"""

from pathlib import Path
from typing import List, Optional

import numpy as np
import xarray as xr

from idftools import idf
from idftools.common.errors import GridMismatchError
from idftools.logging import logger
from idftools.prepare.resample import resample_nearest_neighbour
from idftools.tools.common import FileResult, find_idf_files, format_zone
from idftools.tools.options import ResampleOptions
from idftools.util.spatial import align_like

_MAX_LOGGED_ZONES = 10


def _read_zones(zone_path: Path) -> xr.DataArray:
    zones = idf.open(zone_path)
    unique = np.unique(zones.values[~np.isnan(zones.values)])
    shown = ", ".join(format_zone(z) for z in unique[:_MAX_LOGGED_ZONES])
    if unique.size > _MAX_LOGGED_ZONES:
        shown += ", ..."
    logger.info(
        f"Zone file {zone_path.name} has {unique.size} unique zone values: {shown}"
    )
    return zones


def _resample_file(
    path: Path,
    output_path: Path,
    zones: Optional[xr.DataArray],
    options: ResampleOptions,
) -> None:
    values = idf.open(path)
    nodata = values.attrs.get("nodata", 1.0e20)
    if zones is not None:
        values = align_like(values, zones)

    zone_callback = None
    if options.split_by_zone:

        def zone_callback(zone: float, zone_result: xr.DataArray) -> None:
            zone_path = output_path.with_name(f"{path.stem}_zone{format_zone(zone)}.idf")
            logger.info(f"Writing zone result file {zone_path.name}")
            idf.write(zone_path, zone_result, nodata=nodata)

    resampled = resample_nearest_neighbour(
        values,
        zones,
        conflict_method=options.conflict_method,
        diagonal=options.diagonal,
        zone_callback=zone_callback,
    )
    logger.info(f"Writing result file {output_path.name}")
    idf.write(output_path, resampled, nodata=nodata)


def resample_files(
    input_dir, pattern: str, output_dir, options: ResampleOptions
) -> List[FileResult]:
    """
    Fill the NoData cells of every IDF file in ``input_dir`` that matches
    ``pattern`` with nearest neighbour values, see
    :func:`idftools.prepare.resample_nearest_neighbour`.

    Results are written to ``output_dir`` as ``<name>_resampled.idf``. When a
    zone file is given, each result gets the extent of the zone file.

    A file that cannot be processed, for example because its cell size
    differs from the zone file, is reported in its :class:`FileResult`; the
    remaining files are still processed.

    Parameters
    ----------
    input_dir: str or Path
    pattern: str
        Glob pattern, e.g. ``"kh_*.idf"``.
    output_dir: str or Path
    options: ResampleOptions

    Returns
    -------
    list of FileResult
    """
    paths = find_idf_files(Path(input_dir), pattern)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    if options.output_filename is not None and len(paths) > 1:
        logger.warning(
            f"Output filename {options.output_filename} is used for {len(paths)} "
            "input files, only the last result is kept"
        )

    zones = None
    if options.zone_path is not None:
        zones = _read_zones(Path(options.zone_path))

    results = []
    for path in paths:
        output_name = options.output_filename or f"{path.stem}_resampled.idf"
        output_path = output_dir / output_name
        logger.info(f"Processing file {path.name} ...")
        try:
            _resample_file(path, output_path, zones, options)
        except (GridMismatchError, ValueError, OSError) as e:
            logger.error(f"Could not resample {path.name}: {e}")
            results.append(FileResult(path, error=e))
            continue
        results.append(FileResult(path, output_path))
    return results
