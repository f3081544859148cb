"""Utility modules for the guideline scraper."""

from .config import (
    ConfigManager,
    ScraperConfig,
    OutputConfig,
    BrowserConfig,
    CrawlConfig,
    SelectorConfig,
    LoggingConfig,
)
from .logging import LoggerFactory, log_with_context, StructuredLogFormatter, LOGGER_NAME
from .text import format_title, normalize_section_label, contains_any

__all__ = [
    'ConfigManager',
    'ScraperConfig',
    'OutputConfig',
    'BrowserConfig',
    'CrawlConfig',
    'SelectorConfig',
    'LoggingConfig',
    'LoggerFactory',
    'log_with_context',
    'StructuredLogFormatter',
    'LOGGER_NAME',
    'format_title',
    'normalize_section_label',
    'contains_any',
]
