"""Tests for logging setup."""

import logging

from logger import setup_logging


def test_level_from_name():
    assert setup_logging("DEBUG").level == logging.DEBUG
    setup_logging("INFO")


def test_unknown_level_falls_back_to_info():
    assert setup_logging("CHATTY").level == logging.INFO


def test_setup_twice_does_not_stack_handlers():
    first = len(setup_logging().handlers)
    assert len(setup_logging().handlers) == first
