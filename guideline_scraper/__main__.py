#!/usr/bin/env python3
"""Guideline Scraper CLI entrypoint."""

import os
import sys
import json
import argparse
import logging

from guideline_scraper.lib.html_document import HtmlDocument
from guideline_scraper.lib.section_extractor import SectionExtractor
from guideline_scraper.utils.config import ConfigManager, ScraperConfig
from guideline_scraper.utils.logging import LoggerFactory


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Medical guideline scraper")
    parser.add_argument(
        "-c", "--config",
        default="config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "-o", "--output-dir",
        help="Output directory for the records and ledger files"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "-l", "--letters",
        help="Only crawl these table of contents letters, e.g. ABC"
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window"
    )
    parser.add_argument(
        "--html",
        nargs="+",
        metavar="FILE",
        help="Classify saved section pages and print the result, without a browser"
    )
    return parser


def apply_overrides(config: ScraperConfig, args: argparse.Namespace) -> ScraperConfig:
    if args.output_dir:
        config.output.dir = os.path.abspath(args.output_dir)
    if args.verbose:
        config.logging.verbose = True
    if args.letters:
        letters = args.letters.upper()
        if not letters.isalpha() or not letters.isascii():
            raise ValueError(f"Invalid letters: {args.letters}")
        config.crawl.letters = letters
    if args.headed:
        config.browser.headless = False
    return config


def classify_files(config: ScraperConfig, paths) -> int:
    """Print the subsection mapping of each saved page as JSON."""
    extractor = SectionExtractor(
        driver=None,
        crawl=config.crawl,
        selectors=config.selectors,
    )
    results = {}
    for path in paths:
        results[path] = extractor.classify(HtmlDocument.from_file(path))
    print(json.dumps(results, ensure_ascii=False, indent=2))
    return 0


def main(argv=None):
    """Main entry point for the guideline scraper."""
    args = build_parser().parse_args(argv)

    config = apply_overrides(ConfigManager(args.config).get_settings(), args)

    logger = LoggerFactory.create_logger(config.logging)

    if args.html:
        return classify_files(config, args.html)

    # Imported here so offline classification does not start Playwright
    from guideline_scraper.lib.browser import BrowserSession
    from guideline_scraper.scraper import GuidelineScraper

    session = BrowserSession.launch(config.browser)
    scraper = GuidelineScraper.from_session(config, session)
    success = scraper.run()

    if success or config.browser.close_on_failure:
        close_session(session, logger)
    elif not config.browser.headless and sys.stdin.isatty():
        # The browser dies with this process, so hold it open until the operator is done
        logger.warning("Crawl aborted, browser left open for inspection")
        input("Press Enter to close the browser and exit...")
        close_session(session, logger)
    else:
        logger.warning("Crawl aborted, browser session was not closed cleanly")

    logger.info("Done!")
    return 0 if success else 1


def close_session(session, logger: logging.Logger) -> None:
    try:
        session.close()
    except Exception as e:
        logger.error(f"Error while closing browser: {e}")


if __name__ == "__main__":
    sys.exit(main())
