# tests/conftest.py
"""Shared pytest fixtures."""
import logging

import pytest

from fakes import FakeDriver
from guideline_scraper.utils.config import ScraperConfig


@pytest.fixture
def fake_driver():
    return FakeDriver()


@pytest.fixture
def config(tmp_path):
    config = ScraperConfig()
    config.output.dir = str(tmp_path / "output")
    return config


@pytest.fixture(autouse=True)
def reset_scraper_logger():
    """Drop handlers a CLI test attached to the shared logger."""
    yield
    logger = logging.getLogger("guideline_scraper")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
