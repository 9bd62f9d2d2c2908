"""
Functions for reading and writing iMOD Data Files (IDFs) to ``xarray`` objects.

Only two dimensional, equidistant IDFs are supported: these are the boundary
and value grids processed by :mod:`idftools.prepare`. The primary functions
are :func:`idftools.idf.open` and :func:`idftools.idf.write`.
"""

import pathlib
import struct

import numpy as np
import xarray as xr

from idftools.util import spatial
from idftools.util.structured import is_nodata

# Make sure we can still use the built-in function...
f_open = open


def header(path):
    """Read the IDF header information into a dictionary"""
    attrs = {}
    with f_open(path, "rb") as f:
        reclen_id = struct.unpack("i", f.read(4))[0]  # Lahey RecordLength Ident.
        if reclen_id == 1271:
            floatsize = intsize = 4
            floatformat = "f"
            intformat = "i"
            dtype = "float32"
            doubleprecision = False
        # 2296 was a typo in the iMOD manual. Keep 2296 around in case some IDFs
        # were written with this identifier.
        elif reclen_id == 2295 or reclen_id == 2296:
            floatsize = intsize = 8
            floatformat = "d"
            intformat = "q"
            dtype = "float64"
            doubleprecision = True
        else:
            raise ValueError(
                f"Not a supported IDF file: {path}\n"
                "Record length identifier should be 1271 or 2295, "
                f"received {reclen_id} instead."
            )

        # Header is fully doubled in size in case of double precision ...
        # This means integers are also turned into 8 bytes
        # and requires padding with some additional bytes
        if doubleprecision:
            f.read(4)  # not used

        ncol = struct.unpack(intformat, f.read(intsize))[0]
        nrow = struct.unpack(intformat, f.read(intsize))[0]
        attrs["xmin"] = struct.unpack(floatformat, f.read(floatsize))[0]
        attrs["xmax"] = struct.unpack(floatformat, f.read(floatsize))[0]
        attrs["ymin"] = struct.unpack(floatformat, f.read(floatsize))[0]
        attrs["ymax"] = struct.unpack(floatformat, f.read(floatsize))[0]
        # dmin and dmax are recomputed during writing
        f.read(floatsize)  # dmin, minimum data value present
        f.read(floatsize)  # dmax, maximum data value present
        attrs["nodata"] = struct.unpack(floatformat, f.read(floatsize))[0]
        # flip definition here such that True means equidistant
        ieq = not struct.unpack("?", f.read(1))[0]
        itb = struct.unpack("?", f.read(1))[0]

        f.read(2)  # not used
        if doubleprecision:
            f.read(4)  # not used

        if not ieq:
            raise ValueError(f"Non-equidistant IDF files are not supported: {path}")

        # dx and dy are stored positively in the IDF
        attrs["dx"] = struct.unpack(floatformat, f.read(floatsize))[0]
        attrs["dy"] = -struct.unpack(floatformat, f.read(floatsize))[0]

        if itb:
            attrs["top"] = struct.unpack(floatformat, f.read(floatsize))[0]
            attrs["bot"] = struct.unpack(floatformat, f.read(floatsize))[0]

        attrs["headersize"] = f.tell()
        attrs["ncol"] = ncol
        attrs["nrow"] = nrow
        attrs["dtype"] = dtype

    return attrs


def _read(path, headersize, nrow, ncol, nodata, dtype):
    """
    Read the values of a single IDF file to a numpy.ndarray of shape
    (nrow, ncol). On reading all nodata values are changed to NaN.
    """
    with f_open(path, "rb") as f:
        f.seek(headersize)
        a = np.fromfile(f, dtype, nrow * ncol)
    if a.size < nrow * ncol:
        raise ValueError(f"IDF file {path} holds fewer values than its header states")
    a = np.reshape(a, (nrow, ncol))
    a[is_nodata(a, nodata)] = np.nan
    return a


def open(path) -> xr.DataArray:
    """
    Open a single IDF file as a 2D xarray.DataArray with dims ``("y", "x")``.

    NoData values are converted to NaN; the NoData value of the file is
    kept in ``attrs["nodata"]``.

    Parameters
    ----------
    path : str or Path
        Path to the IDF file.

    Returns
    -------
    xarray.DataArray

    Examples
    --------
    >>> bnd = idftools.idf.open("ibound_l1.idf")
    """
    path = pathlib.Path(path)
    attrs = header(path)
    values = _read(
        path,
        attrs["headersize"],
        attrs["nrow"],
        attrs["ncol"],
        attrs["nodata"],
        attrs["dtype"],
    )
    bounds = (attrs["xmin"], attrs["xmax"], attrs["ymin"], attrs["ymax"])
    coords = spatial._xycoords(bounds, (attrs["dx"], attrs["dy"]))
    return xr.DataArray(
        values,
        coords=coords,
        dims=("y", "x"),
        name=path.stem,
        attrs={"nodata": attrs["nodata"]},
    )


def write(path, a, nodata=1.0e20, dtype=np.float32):
    """
    Write a 2D xarray.DataArray to a IDF file

    Parameters
    ----------
    path : str or Path
        Path to the IDF file to be written
    a : xarray.DataArray
        DataArray to be written. It needs to have exactly a.dims == ('y', 'x').
    nodata : float, optional
        Nodata value in the saved IDF files. Xarray uses nan values to represent
        nodata, but these tend to work unreliably in iMOD(FLOW).
        Defaults to a value of 1.0e20.
    dtype : type, optional
        np.float32 (default) or np.float64.
    """
    if not isinstance(a, xr.DataArray):
        raise TypeError("Data to write must be an xarray.DataArray")
    if not a.dims == ("y", "x"):
        raise ValueError(
            f"Dimensions must be exactly ('y', 'x'). Received {a.dims} instead."
        )

    flip = slice(None, None, -1)
    if not a.indexes["x"].is_monotonic_increasing:
        a = a.isel(x=flip)
    if not a.indexes["y"].is_monotonic_decreasing:
        a = a.isel(y=flip)

    if dtype == np.float64:
        reclenid = 2295
        floatformat = "d"
        intformat = "q"
        doubleprecision = True
    elif dtype == np.float32:
        reclenid = 1271
        floatformat = "f"
        intformat = "i"
        doubleprecision = False
    else:
        raise ValueError("Invalid dtype, IDF allows only np.float32 and np.float64")
    a = a.astype(dtype)

    # dmin and dmax describe the data, not the nodata value
    if bool(a.notnull().any()):
        dmin = float(a.min())
        dmax = float(a.max())
    else:
        dmin = dmax = nodata
    a = a.fillna(nodata)

    with f_open(path, "wb") as f:
        f.write(struct.pack("i", reclenid))  # Lahey RecordLength Ident.
        if doubleprecision:
            f.write(struct.pack("i", reclenid))
        nrow = a.y.size
        ncol = a.x.size
        f.write(struct.pack(intformat, ncol))
        f.write(struct.pack(intformat, nrow))

        dx, xmin, xmax, dy, ymin, ymax = spatial.spatial_reference(a)

        f.write(struct.pack(floatformat, xmin))
        f.write(struct.pack(floatformat, xmax))
        f.write(struct.pack(floatformat, ymin))
        f.write(struct.pack(floatformat, ymax))
        f.write(struct.pack(floatformat, dmin))
        f.write(struct.pack(floatformat, dmax))
        f.write(struct.pack(floatformat, nodata))
        f.write(struct.pack("?", False))  # ieq, stored inverted: equidistant
        f.write(struct.pack("?", False))  # itb
        f.write(struct.pack("xx"))  # not used
        if doubleprecision:
            f.write(struct.pack("xxxx"))  # not used

        f.write(struct.pack(floatformat, abs(dx)))
        f.write(struct.pack(floatformat, abs(dy)))
        np.ascontiguousarray(a.values).tofile(f)
