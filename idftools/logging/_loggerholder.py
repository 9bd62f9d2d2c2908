from idftools.logging.backends import NullLogger
from idftools.logging.ilogger import ILogger
from idftools.logging.loglevel import LogLevel


class _LoggerHolder(ILogger):
    """
    The module level ``idftools.logging.logger``. Modules import the holder
    once; :func:`idftools.logging.configure` swaps the wrapper inside it.
    """

    def __init__(self) -> None:
        self.instance: ILogger = NullLogger()

    def _log(self, level: LogLevel, message: str, additional_depth: int) -> None:
        self.instance._log(level, message, additional_depth)
