"""Tests for trendideas/log.py: component loggers."""

import logging

from trendideas.log import ROOT_LOGGER, get_logger


def test_component_logger_is_child_of_package_logger():
    logger = get_logger("sources.reddit")
    assert logger.name == "trendideas.sources.reddit"
    assert logger.parent.name == "trendideas.sources"
    assert logger.propagate


def test_component_records_reach_package_handlers():
    records = []

    class Collect(logging.Handler):
        def emit(self, record):
            records.append(record)

    handler = Collect(level=logging.DEBUG)
    root = get_logger()
    root.addHandler(handler)
    try:
        get_logger("repository").warning("write failed")
    finally:
        root.removeHandler(handler)

    assert root.name == ROOT_LOGGER
    assert [(r.name, r.getMessage()) for r in records] == [("trendideas.repository", "write failed")]
