# ScnLib - extraction of fluorescence channel planes from Leica SCN slides.
# Copyright (C) 2026  ScnLib authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
import sys
import logging


VERBOSITY_TO_LEVELS = {
    0: logging.WARN,  # For simplicity. Includes ERROR, CRITICAL
    1: logging.INFO,
    2: logging.DEBUG,
    3: logging.NOTSET,  # Equivalent to no filtering. Everything is logged.
}


def map_logging_verbosity(verbosity):
    '''Maps a command line verbosity count to a logging level.

    Parameters
    ----------
    verbosity: int
        logging verbosity level (0-3); larger values are capped

    Returns
    -------
    int
        logging level as exported by the `logging` module

    Raises
    ------
    ValueError
        when `verbosity` is negative
    '''
    if verbosity < 0:
        raise ValueError('Argument "verbosity" must be a positive number.')
    if verbosity >= len(VERBOSITY_TO_LEVELS):
        verbosity = len(VERBOSITY_TO_LEVELS) - 1
    return VERBOSITY_TO_LEVELS.get(verbosity)


def configure_logging(level, name='scnlib'):
    '''Configures the logger of the package for the command line application.

    Two stream handlers will be added to the logger:
        * "out" that will direct INFO & DEBUG messages to the standard output
          stream
        * "err" that will direct WARN, WARNING, ERROR, & CRITICAL messages to
          the standard error stream

    Parameters
    ----------
    level: int
        logging level
    name: str, optional
        name of the logger that should be configured (default: ``"scnlib"``)

    Returns
    -------
    logging.Logger
        configured logger object

    Warning
    -------
    Logging should only be configured at the main entry point of the
    application, but not within the library!
    '''
    fmt = '%(asctime)s | %(name)-30s | %(levelname)-8s | %(message)s'
    datefmt = '%Y-%m-%d %H:%M:%S'
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    # replace handlers of a previous call
    for handler in list(logger.handlers):
        if handler.name in {'out', 'err'}:
            logger.removeHandler(handler)

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.name = 'err'
    stderr_handler.setLevel(logging.WARN)
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.name = 'out'
    stdout_handler.setFormatter(formatter)
    stdout_handler.setLevel(0)
    stdout_handler.addFilter(InfoFilter())
    logger.addHandler(stdout_handler)
    return logger


class InfoFilter(logging.Filter):

    def filter(self, rec):
        return rec.levelno in (logging.DEBUG, logging.INFO)
