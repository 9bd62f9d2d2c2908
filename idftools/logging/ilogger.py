from abc import abstractmethod

from idftools.logging.loglevel import LogLevel


class ILogger:
    """
    Interface of the logger wrappers. Wrappers only implement ``_log``.

    ``additional_depth`` is the number of extra frames between the line that
    should be reported as the origin of the message and the logging call,
    e.g. 1 when logging from within a decorator.
    """

    @abstractmethod
    def _log(self, level: LogLevel, message: str, additional_depth: int) -> None:
        raise NotImplementedError

    def log(self, loglevel: LogLevel, message: str, additional_depth: int = 0) -> None:
        self._log(loglevel, message, additional_depth)

    def debug(self, message: str, additional_depth: int = 0) -> None:
        self._log(LogLevel.DEBUG, message, additional_depth)

    def info(self, message: str, additional_depth: int = 0) -> None:
        self._log(LogLevel.INFO, message, additional_depth)

    def warning(self, message: str, additional_depth: int = 0) -> None:
        self._log(LogLevel.WARNING, message, additional_depth)

    def error(self, message: str, additional_depth: int = 0) -> None:
        self._log(LogLevel.ERROR, message, additional_depth)
