import re
import time
import logging
from typing import Callable, Dict, Optional, Set

from guideline_scraper.lib.models import EmptyContentError
from guideline_scraper.lib.section_extractor import SectionExtractor
from guideline_scraper.lib.sink import JsonlSink
from guideline_scraper.utils.config import ScraperConfig
from guideline_scraper.utils.logging import log_with_context

logger = logging.getLogger('guideline_scraper')


class GuidelineScraper:
    """Crawls the alphabetical table of contents and saves each guideline once."""

    def __init__(self,
                 config: ScraperConfig,
                 driver,
                 sink: JsonlSink,
                 extractor: Optional[SectionExtractor] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize the scraper.

        Args:
            config (ScraperConfig): Run configuration
            driver: Page capability (PageDriver) shared with the extractor
            sink (JsonlSink): Output for records and the name ledger
            extractor (SectionExtractor, optional): Defaults to one built on the driver
            sleep (callable): Pause used between attempts
        """
        self.config = config
        self.driver = driver
        self.sink = sink
        self.extractor = extractor or SectionExtractor(
            driver,
            crawl=config.crawl,
            selectors=config.selectors,
            mask_version_numbers=config.output.mask_version_numbers,
        )
        self.sleep = sleep

        self.guideline_pattern = re.compile(config.crawl.guideline_url_pattern)
        self.content_patterns = [re.compile(p) for p in config.crawl.content_url_patterns]

        self.visited: Set[str] = set()
        self.saved_per_letter: Dict[str, int] = {}
        self.found_per_letter: Dict[str, int] = {}

    @classmethod
    def from_session(cls, config: ScraperConfig, session) -> 'GuidelineScraper':
        """Build a scraper writing to the configured output files through a browser session."""
        sink = JsonlSink(config.output.records_path, config.output.ledger_path)
        return cls(config, session.driver, sink)

    def letter_url(self, letter: str) -> str:
        return f"{self.config.toc_url}?letter={letter}"

    def accept(self, name: str, url: str) -> bool:
        """Apply the visited, domain and content-type filters in order."""
        if name in self.visited:
            logger.info(f"\tGuideline {name} already saved, skipping...")
            return False
        if not self.guideline_pattern.search(url):
            logger.info("Skipping guideline, not a Diseases URL")
            return False
        if not any(pattern.search(url) for pattern in self.content_patterns):
            logger.info("Skipping guideline, not a symptoms-causes or diagnosis-treatment page")
            return False
        return True

    def scrape_guideline(self, name: str, url: str) -> bool:
        """
        Extract and save one guideline, retrying with a long cooldown.

        Args:
            name (str): Guideline display name
            url (str): Guideline URL

        Returns:
            bool: True if the guideline was saved
        """
        crawl = self.config.crawl
        guideline = None
        for attempt in range(1, crawl.max_attempts + 1):
            try:
                # Short pause before every request to avoid getting blocked
                self.sleep(crawl.short_delay)
                self.driver.goto(url)
                guideline = self.extractor.extract_guideline(name, url)
                if guideline.is_empty():
                    logger.warning(f"Empty content. Likely got blocked for guideline {name}")
                    raise EmptyContentError(f"No content found for guideline {name}")

                self.sink.append_record(guideline)
                break
            except Exception as e:
                guideline = None
                logger.warning(
                    f"\tError while scraping guideline {name} "
                    f"(attempt {attempt}/{crawl.max_attempts}), retrying: {e}"
                )
                # A failure usually means the site is throttling us
                self.sleep(crawl.failure_cooldown)

        if guideline is None:
            logger.error(f"\tAll attempts to scrape guideline {name} FAILED, skipping...")
            return False

        # The record is on disk; a ledger failure must not cause it to be written again
        self.visited.add(name)
        self.sink.append_name(guideline.name)
        logger.info('\tSaved guideline!')
        return True

    def process_letter(self, letter: str) -> int:
        """
        Scrape every guideline listed under one letter.

        Args:
            letter (str): Table of contents letter

        Returns:
            int: Number of guidelines saved for the letter
        """
        letter_url = self.letter_url(letter)
        self.driver.goto(letter_url)
        self.driver.wait(self.config.crawl.short_delay)
        logger.info(f"Letter: {letter} URL: {letter_url}")

        saved = 0
        self.saved_per_letter[letter] = 0
        self.found_per_letter[letter] = 0

        if not self.driver.exists(self.config.selectors.toc_item):
            logger.info(f"No guidelines found for letter {letter}")
            return saved

        toc_links = self.driver.get_links(self.config.selectors.toc_item)
        self.found_per_letter[letter] = len(toc_links)

        for index, (name, url) in enumerate(toc_links):
            name = (name or "").strip()
            logger.info(f"Guideline {index} of {len(toc_links)}: Name: {name} URL: {url}")
            if not self.accept(name, url):
                continue
            if self.scrape_guideline(name, url):
                saved += 1
                self.saved_per_letter[letter] = saved

        log_with_context(
            logger, logging.INFO,
            f"Letter {letter}: {saved} guidelines saved",
            {'letter': letter, 'found': len(toc_links), 'saved': saved}
        )
        return saved

    def run(self) -> bool:
        """
        Run the crawl over all configured letters.

        Returns:
            bool: False if the crawl was aborted by an unexpected error
        """
        all_good = True
        try:
            self.driver.goto(self.config.toc_url)
            self.driver.wait(self.config.crawl.short_delay)
            logger.info(f"Reached table of contents at URL: {self.config.toc_url}")

            for letter in self.config.crawl.letters:
                self.process_letter(letter)
        except Exception as e:
            logger.error(f"Error while scraping: {e}", exc_info=True)
            all_good = False

        self.log_summary()
        return all_good

    def log_summary(self) -> None:
        logger.info("--- Scraping Summary ---")
        for letter, saved in self.saved_per_letter.items():
            found = self.found_per_letter.get(letter, 0)
            logger.info(f"Letter {letter}: {saved} of {found} guidelines saved")
        logger.info(f"Total guidelines saved: {len(self.visited)}")
