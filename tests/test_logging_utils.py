# -*- coding: utf-8 -*-
import logging
import pytest

from scnlib.logging_utils import configure_logging
from scnlib.logging_utils import map_logging_verbosity


@pytest.mark.parametrize('verbosity,level', [
    (0, logging.WARN),
    (1, logging.INFO),
    (2, logging.DEBUG),
    (3, logging.NOTSET),
    (10, logging.NOTSET),
])
def test_map_logging_verbosity(verbosity, level):
    assert map_logging_verbosity(verbosity) == level


def test_negative_verbosity():
    with pytest.raises(ValueError):
        map_logging_verbosity(-1)


def test_configure_logging_does_not_duplicate_handlers():
    logger = configure_logging(logging.INFO, name='scnlib.test')
    configure_logging(logging.DEBUG, name='scnlib.test')
    assert sorted(h.name for h in logger.handlers) == ['err', 'out']
    assert logger.level == logging.DEBUG
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
