import os
import re
import string
import yaml
import logging
from dataclasses import dataclass, field, fields
from typing import Dict, List, Any, Optional, Union, get_args, get_origin

logger = logging.getLogger('guideline_scraper')


@dataclass
class OutputConfig:
    dir: str = "output"
    records_file: str = "mayo_guidelines.jsonl"
    ledger_file: str = "mayo_toc.txt"
    mask_version_numbers: bool = False

    @property
    def records_path(self) -> str:
        return os.path.join(self.dir, self.records_file)

    @property
    def ledger_path(self) -> str:
        return os.path.join(self.dir, self.ledger_file)


@dataclass
class BrowserConfig:
    headless: bool = True
    stealth: bool = True
    block_trackers: bool = True
    blocked_url_patterns: List[str] = field(default_factory=lambda: [
        r"doubleclick\.net",
        r"googlesyndication\.com",
        r"google-analytics\.com",
        r"googletagmanager\.com",
        r"facebook\.net",
        r"adservice\.",
    ])
    viewport: Dict[str, int] = field(default_factory=lambda: {"width": 800, "height": 600})
    close_on_failure: bool = False


@dataclass
class CrawlConfig:
    letters: str = string.ascii_uppercase
    short_delay: float = 10.0
    failure_cooldown: float = 300.0
    max_attempts: int = 5
    section_filter: List[str] = field(default_factory=lambda: ["Symptoms", "Diagnosis"])
    guideline_url_pattern: str = r"mayoclinic\.org/diseases-conditions"
    content_url_patterns: List[str] = field(default_factory=lambda: [
        r"/symptoms-causes",
        r"/diagnosis-treatment",
    ])


@dataclass
class SelectorConfig:
    toc_item: str = "#cmp-skip-to-main__content a"
    section_tabs: str = "#access-nav a, div.cmp-tab-navigation-tabs a"
    content_bases: List[str] = field(default_factory=lambda: [
        "div.content",
        "div.aem-GridColumn section",
    ])
    content_elements: List[str] = field(default_factory=lambda: ["li", "h2", "p"])
    nested_container: str = "DIV.content"
    excluded_ancestors: List[str] = field(default_factory=lambda: [
        "references",
        "acces-list-container",
        "tableofcontents",
    ])


@dataclass
class LoggingConfig:
    verbose: bool = True
    structured: bool = False
    file: Optional[str] = "scraper.log"
    dir: str = "logs"


@dataclass
class ScraperConfig:
    """Complete run configuration for the guideline scraper."""

    toc_url: str = "https://www.mayoclinic.org/diseases-conditions/index"
    output: OutputConfig = field(default_factory=OutputConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    crawl: CrawlConfig = field(default_factory=CrawlConfig)
    selectors: SelectorConfig = field(default_factory=SelectorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScraperConfig':
        """
        Build a configuration from a plain mapping, falling back to defaults
        for every missing key.

        Args:
            data (dict): Parsed configuration document

        Returns:
            ScraperConfig: The configuration

        Raises:
            ValueError: If a section is not a mapping or holds unknown keys
        """
        sections = {
            'output': OutputConfig,
            'browser': BrowserConfig,
            'crawl': CrawlConfig,
            'selectors': SelectorConfig,
            'logging': LoggingConfig,
        }
        kwargs = {}
        for key, value in data.items():
            if key == 'toc_url':
                kwargs[key] = _coerce('toc_url', str, value)
            elif key in sections:
                if value is None:
                    continue
                if not isinstance(value, dict):
                    raise ValueError(f"'{key}' must be a dictionary")
                kwargs[key] = _build_section(key, sections[key], value)
            else:
                raise ValueError(f"Unknown configuration key '{key}'")
        return cls(**kwargs)


TRUE_STRINGS = {'true', 'yes', 'on', '1'}
FALSE_STRINGS = {'false', 'no', 'off', '0'}


def _build_section(section: str, section_cls, values: Dict[str, Any]):
    """Instantiate a config section, converting each value to its declared type."""
    declared = {f.name: f.type for f in fields(section_cls)}
    kwargs = {}
    for name, value in values.items():
        if name not in declared:
            raise ValueError(f"Unknown key '{name}' in '{section}'")
        kwargs[name] = _coerce(f"{section}.{name}", declared[name], value)
    return section_cls(**kwargs)


def _coerce(name: str, expected: Any, value: Any) -> Any:
    """
    Convert a YAML or environment-substituted value to the declared field type.

    Args:
        name (str): Dotted key, used in error messages
        expected: Field annotation (bool, int, float, str, Optional[str],
            List[str] or Dict[str, int])
        value: Raw value

    Returns:
        The converted value

    Raises:
        ValueError: If the value cannot be converted
    """
    origin = get_origin(expected)
    args = get_args(expected)

    if origin is Union:
        if value is None and type(None) in args:
            return None
        inner = [arg for arg in args if arg is not type(None)]
        return _coerce(name, inner[0], value)

    if origin in (list, List):
        if not isinstance(value, list):
            raise ValueError(f"'{name}' must be a list")
        return [_coerce(f"{name}[{i}]", args[0], item) for i, item in enumerate(value)]

    if origin in (dict, Dict):
        if not isinstance(value, dict):
            raise ValueError(f"'{name}' must be a dictionary")
        return {str(k): _coerce(f"{name}.{k}", args[1], v) for k, v in value.items()}

    if expected is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in TRUE_STRINGS:
            return True
        if isinstance(value, str) and value.strip().lower() in FALSE_STRINGS:
            return False
        raise ValueError(f"'{name}' must be true or false, got {value!r}")

    if expected in (int, float):
        if isinstance(value, bool):
            raise ValueError(f"'{name}' must be a number, got {value!r}")
        if expected is int and isinstance(value, float) and not value.is_integer():
            raise ValueError(f"'{name}' must be an integer, got {value!r}")
        try:
            return expected(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"'{name}' must be a number, got {value!r}") from e

    if expected is str:
        if not isinstance(value, str):
            raise ValueError(f"'{name}' must be a string, got {value!r}")
        return value

    return value


class ConfigManager:
    """Configuration management with environment variable substitution and validation."""

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path (str): Path to the YAML configuration file
        """
        self.config_path = config_path
        self.config = self._load_config()
        self.settings = ScraperConfig.from_dict(self.config)
        self._validate_settings(self.settings)

    def _load_config(self) -> Dict[str, Any]:
        """
        Load and process the configuration file.

        Returns:
            dict: Processed configuration, empty when the file is unusable
        """
        if not os.path.exists(self.config_path):
            logger.warning(f"Configuration file not found: {self.config_path}, using defaults")
            return {}

        try:
            with open(self.config_path, 'r') as file:
                config = yaml.safe_load(file)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load configuration: {e}")
            return {}

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a dictionary")

        return self._substitute_env_vars(config)

    def _substitute_env_vars(self, config: Any) -> Any:
        """
        Recursively substitute environment variables in the configuration.

        Args:
            config: Configuration object (dict, list, or scalar)

        Returns:
            Configuration with environment variables substituted
        """
        if isinstance(config, dict):
            return {k: self._substitute_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]
        elif isinstance(config, str):
            # Replace ${VAR} or $VAR with environment variable
            pattern = r'\${([^}]+)}|\$([a-zA-Z_][a-zA-Z0-9_]*)'

            def replace_env_var(match):
                var_name = match.group(1) or match.group(2)
                return os.environ.get(var_name, match.group(0))

            return re.sub(pattern, replace_env_var, config)
        else:
            return config

    def _validate_settings(self, settings: ScraperConfig) -> None:
        """
        Validate the configuration values.

        Args:
            settings (ScraperConfig): Configuration to validate

        Raises:
            ValueError: If configuration is invalid
        """
        if not settings.toc_url:
            raise ValueError("'toc_url' must not be empty")

        crawl = settings.crawl
        if not crawl.letters:
            raise ValueError("'crawl.letters' must not be empty")
        for letter in crawl.letters:
            if letter not in string.ascii_uppercase:
                raise ValueError(f"Invalid letter '{letter}' in 'crawl.letters', expected A-Z")

        if crawl.max_attempts < 1:
            raise ValueError("'crawl.max_attempts' must be at least 1")
        if crawl.short_delay < 0 or crawl.failure_cooldown < 0:
            raise ValueError("Delays must not be negative")

        required_lists = {
            'crawl.section_filter': crawl.section_filter,
            'crawl.content_url_patterns': crawl.content_url_patterns,
            'selectors.content_bases': settings.selectors.content_bases,
            'selectors.content_elements': settings.selectors.content_elements,
        }
        for name, value in required_lists.items():
            if not value:
                raise ValueError(f"'{name}' must not be empty")

        patterns = [crawl.guideline_url_pattern] + list(crawl.content_url_patterns)
        patterns += list(settings.browser.blocked_url_patterns)
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid regular expression '{pattern}': {e}") from e

    def get_config(self) -> Dict[str, Any]:
        """
        Get the processed configuration document.

        Returns:
            dict: The configuration as loaded from disk
        """
        return self.config

    def get_settings(self) -> ScraperConfig:
        """
        Get the validated configuration.

        Returns:
            ScraperConfig: The configuration
        """
        return self.settings
