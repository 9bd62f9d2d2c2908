from enum import Enum
from typing import Optional

import idftools

from .backends import LoguruLogger, NullLogger, PathLike, PythonLogger
from .loglevel import LogLevel


class LoggerType(Enum):
    PYTHON = "python"
    LOGURU = "loguru"
    NULL = "null"


def configure(
    logger_type: LoggerType,
    log_level: LogLevel = LogLevel.WARNING,
    stdout: bool = True,
    logfile: Optional[PathLike] = None,
) -> None:
    """
    Route the messages of idftools to a logging framework.

    Parameters
    ----------
    logger_type : LoggerType
        PYTHON for the python logging module (logger name ``"idftools"``),
        LOGURU for loguru, NULL to switch logging off again.
    log_level : LogLevel, default WARNING
    stdout : bool, default True
        Write messages to stdout.
    logfile : str or Path, optional
        Also write messages to this file, e.g. next to the output of a batch
        run.
    """
    match logger_type:
        case LoggerType.PYTHON:
            idftools.logging.logger.instance = PythonLogger(log_level, stdout, logfile)
        case LoggerType.LOGURU:
            idftools.logging.logger.instance = LoguruLogger(log_level, stdout, logfile)
        case _:
            idftools.logging.logger.instance = NullLogger()
