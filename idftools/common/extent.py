from pydantic.dataclasses import dataclass

from idftools.common.dataclass_type import _CONFIG, DataclassType


@dataclass(config=_CONFIG, frozen=True)
class Extent(DataclassType):
    """
    Rectangular spatial extent, defined by its lower left (``xmin``,
    ``ymin``) and upper right (``xmax``, ``ymax``) corner.

    Examples
    --------
    Parse an extent as written on a command line or in a settings file:

    >>> extent = Extent.parse("184000,352500,200500,371000")

    Retrieve the extent of a grid:

    >>> extent = Extent.from_grid(da)
    """

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def parse(cls, text: str) -> "Extent":
        """Parse a comma separated string: ``"xll,yll,xur,yur"``."""
        parts = text.split(",")
        if len(parts) != 4:
            raise ValueError(
                f"Extent should consist of four comma separated values (xll,yll,xur,yur), got: {text}"
            )
        try:
            xmin, ymin, xmax, ymax = (float(part) for part in parts)
        except ValueError as e:
            raise ValueError(f"Could not parse coordinates of extent: {text}") from e
        return cls(xmin, ymin, xmax, ymax)

    @classmethod
    def from_grid(cls, da) -> "Extent":
        from idftools.util.spatial import spatial_reference

        _, xmin, xmax, _, ymin, ymax = spatial_reference(da)
        return cls(xmin, ymin, xmax, ymax)

    def is_valid(self) -> bool:
        """An extent is valid when it covers some area."""
        return (self.xmax > self.xmin) and (self.ymax > self.ymin)

    def contains(self, other: "Extent") -> bool:
        return (
            self.xmin <= other.xmin
            and self.ymin <= other.ymin
            and self.xmax >= other.xmax
            and self.ymax >= other.ymax
        )

    def intersects(self, other: "Extent") -> bool:
        return (
            self.xmin < other.xmax
            and other.xmin < self.xmax
            and self.ymin < other.ymax
            and other.ymin < self.ymax
        )

    def __str__(self) -> str:
        return f"({self.xmin},{self.ymin},{self.xmax},{self.ymax})"
