from enum import Enum


class LogLevel(Enum):
    """
    Log levels used by idftools. The values match those of the python logging
    module.
    """

    DEBUG = 10
    """
    Progress of the grid algorithms: growth rounds, pruning passes, rollback.
    """
    INFO = 20
    """
    Files being read, processed and written by the batch tools.
    """
    WARNING = 30
    """
    Skipped output files, colliding classification values.
    """
    ERROR = 40
    """
    A single file in a batch could not be processed.
    """
