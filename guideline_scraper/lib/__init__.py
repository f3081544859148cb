#!/usr/bin/env python3
"""
Scraper Module Library

Browser session, extraction and output modules for the guideline scraper.
"""

from .models import GuidelineRecord, ElementSnapshot, EmptyContentError
from .content_classifier import classify_elements, build_content_selector
from .html_document import HtmlDocument
from .section_extractor import SectionExtractor
from .sink import JsonlSink

__all__ = [
    "GuidelineRecord",
    "ElementSnapshot",
    "EmptyContentError",
    "classify_elements",
    "build_content_selector",
    "HtmlDocument",
    "SectionExtractor",
    "JsonlSink",
]
