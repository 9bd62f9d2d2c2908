class GridMismatchError(ValueError):
    """
    Raised when two grids that have to be processed together do not share the
    same cell size, extent or shape.
    """
