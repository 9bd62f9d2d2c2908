# exports
from idftools import logging, prepare, tools, util
from idftools import idf
from idftools.common.errors import GridMismatchError
from idftools.common.extent import Extent

__version__ = "0.1.0"
