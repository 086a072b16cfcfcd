"""Tests for logging configuration."""

import logging

import pytest
import structlog

from gator.utils.logger import _level, build_processors


@pytest.mark.parametrize(
    ("name", "expected"),
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("loud", logging.INFO)],
)
def test_level_names(name, expected):
    assert _level(name) == expected


def test_json_chain_renders_json():
    chain = build_processors(json_format=True)

    assert isinstance(chain[-1], structlog.processors.JSONRenderer)
    assert structlog.processors.dict_tracebacks in chain


def test_console_chain_formats_exceptions():
    chain = build_processors(json_format=False)

    assert isinstance(chain[-1], structlog.dev.ConsoleRenderer)
    assert structlog.processors.format_exc_info in chain
