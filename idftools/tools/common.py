from pathlib import Path
from typing import List, Optional

from pydantic.dataclasses import dataclass

from idftools.common.dataclass_type import _CONFIG, DataclassType


@dataclass(config=_CONFIG)
class FileResult(DataclassType):
    """
    Outcome of processing a single file.

    ``output_path`` is None when the file was skipped or failed; ``error``
    holds the exception of a failed file.
    """

    path: Path
    output_path: Optional[Path] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def find_idf_files(input_dir: Path, pattern: str) -> List[Path]:
    paths = sorted(
        path for path in Path(input_dir).glob(pattern) if path.suffix.lower() == ".idf"
    )
    if not paths:
        raise FileNotFoundError(
            f"No IDF files found for filter '{pattern}' in: {Path(input_dir).resolve()}"
        )
    return paths


def format_zone(zone: float) -> str:
    if float(zone).is_integer():
        return str(int(zone))
    return str(zone)
