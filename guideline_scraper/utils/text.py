import re
from typing import Iterable, Optional

# Dotted numbers such as "2.1" or "10.4.3.1"
VERSION_NUMBER_PATTERN = re.compile(r'\b(\d+(?:\.\d+){1,3})\b')


def format_title(title: Optional[str]) -> Optional[str]:
    """Replace dotted version-like numbers in a title with '#'."""
    if title is None:
        return None
    return VERSION_NUMBER_PATTERN.sub('#', title)


def normalize_section_label(label: str) -> str:
    """Normalize a section tab label for storage ("Tests&Diagnosis" -> "Tests& Diagnosis")."""
    return label.replace('&', '& ')


def contains_any(text: str, needles: Iterable[str]) -> bool:
    """Case-sensitive substring test against several candidates."""
    return any(needle in text for needle in needles)
