from functools import wraps
from time import time
from typing import Callable, ParamSpec, TypeVar

from idftools.logging.loglevel import LogLevel

T = TypeVar("T")
P = ParamSpec("P")


def standard_log_decorator(
    start_level: LogLevel = LogLevel.DEBUG, end_level: LogLevel = LogLevel.DEBUG
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator to print log messages announcing the beginning and end of the
    decorated grid routine, including its duration.
    """

    def decorator(fun: Callable[P, T]) -> Callable[P, T]:
        @wraps(fun)
        def wrapper(*args: P.args, **kwargs: P.kwargs):
            from idftools.logging import logger

            routine = f"{fun.__module__}.{fun.__name__}"
            start_time = time()
            logger.log(
                loglevel=start_level,
                message=f"Beginning execution of {routine}...",
                additional_depth=1,
            )

            return_value = fun(*args, **kwargs)
            end_time = time()

            logger.log(
                loglevel=end_level,
                message=f"Finished execution of {routine} in {end_time - start_time} seconds...",
                additional_depth=1,
            )
            return return_value

        return wrapper

    return decorator
