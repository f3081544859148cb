#!/usr/bin/env python3
"""
Section Extractor

Reads the section tabs of a guideline page, keeps the ones whose label
matches the section filter, and extracts each section into a mapping of
subsection heading to text.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..utils.config import CrawlConfig, SelectorConfig
from ..utils.text import contains_any, format_title, normalize_section_label
from .content_classifier import build_content_selector, classify_elements
from .models import GuidelineRecord

logger = logging.getLogger("guideline_scraper")


class SectionExtractor:
    def __init__(
        self,
        driver,
        crawl: Optional[CrawlConfig] = None,
        selectors: Optional[SelectorConfig] = None,
        mask_version_numbers: bool = False,
    ):
        """
        Args:
            driver: Page capability (PageDriver) used for navigation and queries
            crawl: Section filter and settle delay
            selectors: Tab, content base and boilerplate selectors
            mask_version_numbers: Pass record names through format_title
        """
        self.driver = driver
        self.crawl = crawl or CrawlConfig()
        self.selectors = selectors or SelectorConfig()
        self.mask_version_numbers = mask_version_numbers

    def discover_sections(self) -> List[Tuple[str, str]]:
        """
        List the (label, url) pairs of the current page's section tabs that
        pass the section filter.
        """
        sections = []
        for text, url in self.driver.get_links(self.selectors.section_tabs):
            label = normalize_section_label((text or "").strip())
            if not contains_any(label, self.crawl.section_filter):
                continue
            sections.append((label, url))
        return sections

    def extract_guideline(self, name: str, url: str) -> GuidelineRecord:
        """
        Extract the filtered sections of the guideline currently loaded.

        Args:
            name: Guideline display name from the table of contents
            url: Guideline URL, already loaded by the caller

        Returns:
            GuidelineRecord: The guideline with its section content
        """
        content: Dict[str, Dict[str, str]] = {}

        for label, section_url in self.discover_sections():
            # Tabs are listed by both the side navigation and the tab widget
            if label in content:
                continue
            logger.debug(f"\tSection: {label}\n\tURL: {section_url}")
            content[label] = self.extract_section(section_url)

        if self.mask_version_numbers:
            name = format_title(name)
        return GuidelineRecord(name=name, url=url, content=content)

    def extract_section(self, section_url: str) -> Dict[str, str]:
        """Navigate to a section page and classify its content"""
        self.driver.goto(section_url)
        self.driver.wait(self.crawl.short_delay)
        return self.classify(self.driver)

    def find_content_base(self, document) -> Optional[str]:
        """First content base selector present on the page"""
        for base in self.selectors.content_bases:
            if document.exists(base):
                return base
        return None

    def classify(self, document) -> Dict[str, str]:
        """
        Classify the content of a loaded page.

        Args:
            document: Anything offering exists(selector) and
                snapshot_elements(selector), a PageDriver or an HtmlDocument

        Returns:
            Mapping of subsection heading to text, empty when the page has
            no recognizable content container
        """
        base = self.find_content_base(document)
        if base is None:
            logger.warning("Couldn't find content selector for page")
            return {}

        selector = build_content_selector(base, self.selectors.content_elements)
        elements = document.snapshot_elements(selector)
        return classify_elements(
            elements,
            nested_container=self.selectors.nested_container,
            excluded_ancestors=self.selectors.excluded_ancestors,
        )
