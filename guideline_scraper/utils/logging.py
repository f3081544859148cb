import os
import logging
import sys
import json
from datetime import datetime
from typing import Dict, Any, Optional

from .config import LoggingConfig

LOGGER_NAME = "guideline_scraper"

# Context keys the crawl attaches to summary records
CONTEXT_FIELDS = ("letter", "found", "saved", "guideline", "attempt")


class StructuredLogFormatter(logging.Formatter):
    """One JSON object per crawl log line, with the crawl context as top-level fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'time': datetime.fromtimestamp(record.created).isoformat(timespec='seconds'),
            'level': record.levelname,
            'message': record.getMessage(),
        }

        context = getattr(record, 'crawl', None) or {}
        for key in CONTEXT_FIELDS:
            if key in context:
                entry[key] = context[key]

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False)


class LoggerFactory:
    """Builds the scraper logger from the logging section of the configuration."""

    @staticmethod
    def create_logger(config: Optional[LoggingConfig] = None,
                      console_output: bool = True) -> logging.Logger:
        """
        Configure the shared scraper logger.

        Args:
            config (LoggingConfig, optional): verbose selects DEBUG over INFO,
                structured selects JSON lines, file and dir place the log file
            console_output (bool): Whether to also log to stdout

        Returns:
            logging.Logger: The configured logger
        """
        config = config or LoggingConfig()
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(logging.DEBUG if config.verbose else logging.INFO)

        # Reconfiguring replaces earlier handlers
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        if config.structured:
            formatter = StructuredLogFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

        handlers = []
        if console_output:
            handlers.append(logging.StreamHandler(sys.stdout))
        if config.file:
            os.makedirs(config.dir, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(config.dir, config.file), encoding='utf-8'))

        for handler in handlers:
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, context: Dict[str, Any]) -> None:
    """
    Log a message with crawl context (letter, found, saved, ...).

    StructuredLogFormatter writes the context as JSON fields; the plain
    formatter ignores it.
    """
    logger.log(level, msg, extra={'crawl': context})
