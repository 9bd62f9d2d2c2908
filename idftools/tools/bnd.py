"""
Batch correction of boundary IDF files.
"""

from pathlib import Path
from typing import List

import numpy as np

from idftools import idf
from idftools.common.errors import GridMismatchError
from idftools.logging import logger
from idftools.prepare.boundary import correct_boundary, create_boundary
from idftools.tools.common import FileResult, find_idf_files
from idftools.tools.options import BoundaryOptions
from idftools.util.spatial import enlarge


def _correct_file(path: Path, output_path: Path, options: BoundaryOptions) -> None:
    grid = idf.open(path)
    nodata = grid.attrs.get("nodata", 1.0e20)
    if options.extent is not None:
        grid = enlarge(grid, options.extent)

    created = create_boundary(
        grid,
        options.active,
        options.boundary,
        options.inactive,
        extent=options.extent,
        keep_inactive_cells=options.keep_inactive_cells,
        diagonal_check=options.diagonal_check,
    )
    corrected = correct_boundary(
        created,
        options.active,
        options.boundary,
        options.inactive,
        extent=options.extent,
        keep_inactive_cells=options.keep_inactive_cells,
        diagonal_check=options.diagonal_check,
        outer_correction=options.outer_correction,
    )
    logger.info(f"Writing result file {output_path.name}")
    dtype = np.float64 if grid.dtype == np.float64 else np.float32
    idf.write(output_path, corrected, nodata=nodata, dtype=dtype)


def correct_boundary_files(
    input_dir, pattern: str, output_dir, options: BoundaryOptions
) -> List[FileResult]:
    """
    Correct the boundary of every IDF file in ``input_dir`` that matches
    ``pattern``. Results are written to ``output_dir`` under the same name.

    A file that cannot be processed is reported in its :class:`FileResult`;
    the remaining files are still processed.

    Parameters
    ----------
    input_dir: str or Path
    pattern: str
        Glob pattern, e.g. ``"ibound_l*.idf"``.
    output_dir: str or Path
    options: BoundaryOptions

    Returns
    -------
    list of FileResult

    Raises
    ------
    FileNotFoundError
        When no IDF file matches pattern.
    """
    paths = find_idf_files(Path(input_dir), pattern)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    results = []
    for path in paths:
        output_path = output_dir / path.name
        logger.info(f"Processing file {path.name} ...")
        if output_path.exists() and not options.overwrite:
            logger.warning(f"Skipped existing output file {output_path.name}")
            results.append(FileResult(path))
            continue
        try:
            _correct_file(path, output_path, options)
        except (GridMismatchError, ValueError, OSError) as e:
            logger.error(f"Could not correct boundary of {path.name}: {e}")
            results.append(FileResult(path, error=e))
            continue
        results.append(FileResult(path, output_path))
    return results
