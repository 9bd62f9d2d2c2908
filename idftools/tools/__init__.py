"""
Batch processing of IDF files, one file at a time.

A file that fails does not stop the batch: its failure is returned in a
:class:`idftools.tools.FileResult`.
"""

from idftools.tools.bnd import correct_boundary_files
from idftools.tools.common import FileResult
from idftools.tools.options import BoundaryOptions, ResampleOptions
from idftools.tools.resample import resample_files
