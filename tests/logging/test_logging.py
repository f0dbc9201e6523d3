"""Tests for the package-wide logger hierarchy."""

import logging
from io import StringIO

import pytest

from schedgraph.algorithms.scc import tarjan_scc
from schedgraph.graph.task_graph import TaskGraph
from schedgraph.logging import (
    ROOT_LOGGER_NAME,
    disable_debug_logging,
    enable_debug_logging,
    get_logger,
    reset_logging,
    set_global_log_level,
    set_verbosity,
    setup_root_logger,
)


@pytest.fixture(autouse=True)
def _reset_logging_each_test():
    reset_logging()
    yield
    reset_logging()
    setup_root_logger()


def test_debug_toggle_changes_effective_level():
    logger = get_logger("schedgraph.test")

    capture = StringIO()
    handler = logging.StreamHandler(capture)
    handler.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.addHandler(handler)

    logger.info("info-1")
    assert "info-1" in capture.getvalue()

    logger.debug("debug-1")
    assert "debug-1" not in capture.getvalue()

    enable_debug_logging()
    logger.debug("debug-2")
    assert "debug-2" in capture.getvalue()

    disable_debug_logging()
    logger.debug("debug-3")
    assert "debug-3" not in capture.getvalue()

    logger.removeHandler(handler)


def test_global_level_applies_to_existing_and_new_loggers():
    first = get_logger("schedgraph.module1")
    assert first.getEffectiveLevel() == logging.INFO

    set_global_log_level(logging.WARNING)
    assert first.getEffectiveLevel() == logging.WARNING
    assert get_logger("schedgraph.module2").getEffectiveLevel() == logging.WARNING


def test_setup_is_idempotent():
    setup_root_logger(level=logging.INFO, handler=logging.StreamHandler(StringIO()))
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    assert len(root_logger.handlers) == 1

    setup_root_logger(level=logging.DEBUG)
    assert len(root_logger.handlers) == 1
    # Second call is a no-op
    assert root_logger.level == logging.INFO


def test_custom_format_string():
    capture = StringIO()
    fmt = "LEVEL:%(levelname)s|NAME:%(name)s|MSG:%(message)s"
    setup_root_logger(format_string=fmt, handler=logging.StreamHandler(capture))

    get_logger("schedgraph.test.format").info("hello")
    out = capture.getvalue()
    assert "LEVEL:INFO" in out
    assert "NAME:schedgraph.test.format" in out
    assert "MSG:hello" in out


def test_algorithm_debug_output_reaches_caplog(caplog):
    g = TaskGraph(2)
    g.add_edge(0, 1, 3)

    enable_debug_logging()
    with caplog.at_level(logging.DEBUG, logger=ROOT_LOGGER_NAME):
        tarjan_scc(g)

    messages = [r.getMessage() for r in caplog.records]
    assert any("Tarjan SCC: 2 vertices -> 2 components" in m for m in messages)


@pytest.mark.parametrize(
    "verbose,quiet,expected",
    [
        (False, False, logging.INFO),
        (True, False, logging.DEBUG),
        (False, True, logging.WARNING),
        (True, True, logging.DEBUG),
    ],
)
def test_set_verbosity_maps_cli_flags(verbose, quiet, expected):
    assert set_verbosity(verbose, quiet) == expected
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    assert root_logger.level == expected
    assert all(h.level == expected for h in root_logger.handlers)
    assert get_logger("schedgraph.cli").getEffectiveLevel() == expected
