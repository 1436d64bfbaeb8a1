""" Logging setup for scripts built on playweb. The library itself only
    emits records through per-module loggers; nothing is printed unless the
    application configures a handler, for example by calling :func:`setup`.
"""

import logging
import sys


FORMAT = '%(asctime)s | %(levelname).1s | %(name)-30.30s | %(message)s'


def setup(level=logging.INFO, stream=None):
    """ Send records from every playweb logger at *level* or above to
        *stream* (default stdout), replacing any handler a previous call
        installed. Returns the package logger.
    """

    logger = logging.getLogger('playweb')
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if stream is None:
        stream = sys.stdout

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(FORMAT))
    logger.addHandler(handler)

    return logger


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
