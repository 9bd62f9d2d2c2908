"""
Logging for idftools.

Nothing is logged until a logger is configured. The grid routines report
their progress at DEBUG level, the batch tools at INFO level and up.

Examples
--------

Follow a batch run on the console with the python logging module:

>>> import idftools
>>> from idftools.logging import LoggerType, LogLevel
>>>
>>> idftools.logging.configure(LoggerType.PYTHON, LogLevel.INFO)

Keep a log file of the run with loguru, without console output:

>>> idftools.logging.configure(
>>>     LoggerType.LOGURU, LogLevel.DEBUG, stdout=False, logfile="output/bnd.log"
>>> )

Leave the handlers to an existing python logging setup:

>>> import logging
>>> idftools.logging.configure(LoggerType.PYTHON, LogLevel.INFO, stdout=False)
>>> logging.basicConfig(level=logging.INFO, handlers=[logging.StreamHandler()])
"""

from idftools.logging._loggerholder import _LoggerHolder
from idftools.logging.config import LoggerType, configure
from idftools.logging.ilogger import ILogger  # noqa: I001
from idftools.logging.loglevel import LogLevel

logger = _LoggerHolder()
