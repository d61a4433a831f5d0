"""Tests for console and logging helpers (grablin.utils)."""

from __future__ import annotations

import json
import logging

import pytest
from rich.logging import RichHandler

from grablin.utils import LOGGER_NAME, configure_logging, print_error, print_json, print_success


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.mark.unit
def test_configure_logging_levels():
    assert configure_logging(verbose=False).level == logging.WARNING
    assert configure_logging(verbose=True).level == logging.DEBUG


@pytest.mark.unit
def test_configure_logging_does_not_stack_handlers():
    configure_logging()
    logger = configure_logging()
    rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
    assert len(rich_handlers) == 1
    assert logger.propagate is False


@pytest.mark.unit
def test_child_loggers_inherit():
    configure_logging(verbose=True)
    assert logging.getLogger("grablin.client.generator").getEffectiveLevel() == logging.DEBUG


@pytest.mark.unit
def test_print_json_is_parseable(capsys):
    print_json({"valid": True, "errors": ["[bold]not markup[/bold]"]})
    assert json.loads(capsys.readouterr().out) == {"valid": True, "errors": ["[bold]not markup[/bold]"]}


@pytest.mark.unit
def test_status_prefixes(capsys):
    print_success("done")
    print_error("failed")
    out = capsys.readouterr().out
    assert "✓ done" in out
    assert "✗ failed" in out
