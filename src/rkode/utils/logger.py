########################################################################################
##
##                               LOGGING OF RKODE
##                               (utils/logger.py)
##
##      Modules obtain their logger through 'get_logger' so that everything
##      lives below the 'rkode' namespace. The package itself only installs
##      a 'NullHandler', scripts call 'setup_logging' to see the output.
##
########################################################################################

# IMPORTS ==============================================================================

import sys
import logging


# CONSTANTS ============================================================================

ROOT = "rkode"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# FUNCTIONS ============================================================================

def get_logger(name=None):
    """Logger in the 'rkode' namespace

    Parameters
    ----------
    name : None | str
        module name, usually '__name__'

    Returns
    -------
    logger : logging.Logger
    """
    if not name or name == ROOT:
        return logging.getLogger(ROOT)
    if name.startswith(ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT}.{name}")


def setup_logging(level=logging.INFO, format_string=LOG_FORMAT, stream=None):
    """Attach a stream handler to the 'rkode' logger.

    Calling it repeatedly replaces the previously installed handler
    instead of stacking duplicates.

    Parameters
    ----------
    level : int
        logging level of the package logger
    format_string : str
        format of the log records
    stream : None | file
        output stream, defaults to stdout

    Returns
    -------
    logger : logging.Logger
        the configured package logger
    """

    logger = logging.getLogger(ROOT)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_rkode", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(format_string))
    handler._rkode = True
    logger.addHandler(handler)

    return logger


logging.getLogger(ROOT).addHandler(logging.NullHandler())
