"""
Logger wrappers around the python logging module and loguru.

Messages always pass through the :class:`_LoggerHolder` before they reach a
wrapper: caller, ``ILogger.debug`` of the holder, ``_log`` of the holder,
``_log`` of the wrapper. The stack depths below skip those frames, so that
records point at the caller.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger as _loguru_logger

from idftools.logging.ilogger import ILogger
from idftools.logging.loglevel import LogLevel

_FORMAT = "%(name)s: %(asctime)s | %(levelname)s | %(filename)s:%(lineno)s >>> %(message)s"

PathLike = Union[str, Path]


class NullLogger(ILogger):
    """Discards every message. Used until :func:`configure` is called."""

    def _log(self, level: LogLevel, message: str, additional_depth: int) -> None:
        pass


class PythonLogger(ILogger):
    """Logs to the ``"idftools"`` logger of the python logging module."""

    def __init__(
        self, log_level: LogLevel, stdout: bool, logfile: Optional[PathLike]
    ) -> None:
        self.logger = logging.getLogger("idftools")
        self.logger.setLevel(log_level.value)
        formatter = logging.Formatter(_FORMAT)
        handlers = []
        if stdout:
            handlers.append(logging.StreamHandler(stream=sys.stdout))
        if logfile is not None:
            handlers.append(logging.FileHandler(logfile))
        for handler in handlers:
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def _log(self, level: LogLevel, message: str, additional_depth: int) -> None:
        self.logger.log(level.value, message, stacklevel=4 + additional_depth)


class LoguruLogger(ILogger):
    """Logs with loguru. Replaces the sinks loguru has been given so far."""

    def __init__(
        self, log_level: LogLevel, stdout: bool, logfile: Optional[PathLike]
    ) -> None:
        _loguru_logger.remove()
        if stdout:
            _loguru_logger.add(sys.stdout, level=log_level.value)
        if logfile is not None:
            _loguru_logger.add(logfile, level=log_level.value)

    def _log(self, level: LogLevel, message: str, additional_depth: int) -> None:
        _loguru_logger.opt(depth=3 + additional_depth).log(level.name, message)
