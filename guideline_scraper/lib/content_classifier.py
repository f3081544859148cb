#!/usr/bin/env python3
"""
Content Classifier

Turns the headings, paragraphs and list items of a guideline section into a
mapping of subsection heading to body text, skipping boilerplate blocks.
"""

import re
from typing import Dict, Iterable, List, Pattern

from .models import ElementSnapshot

HEADING_TAG = "H2"
LIST_ITEM_TAG = "LI"
PARAGRAPH_TAG = "P"

DEFAULT_NESTED_CONTAINER = "DIV.content"
DEFAULT_EXCLUDED_ANCESTORS = ["references", "acces-list-container", "tableofcontents"]

# Evaluated in page context against every element matched by a selector.
# Returns one {tag, text, ancestors} row per element, in document order.
SNAPSHOT_SCRIPT = """
(elements) => elements.map(el => {
    let ancestors = '';
    let parent = el.parentElement;
    while (parent != null) {
        ancestors += parent.tagName + '.' + parent.className + ' ';
        parent = parent.parentElement;
    }
    return {
        tag: el.tagName,
        text: (el.textContent || '').trim(),
        ancestors: ancestors,
    };
})
"""


def build_content_selector(base: str, elements: Iterable[str]) -> str:
    """Combine element kinds under one base so a single query keeps document order"""
    return ", ".join(f"{base} {element}" for element in elements)


def nested_container_pattern(marker: str = DEFAULT_NESTED_CONTAINER) -> Pattern:
    """Pattern matching an ancestor chain where the container appears twice"""
    escaped = re.escape(marker)
    return re.compile(f"{escaped}.*{escaped}")


def is_excluded(
    ancestors: str,
    nested_pattern: Pattern,
    excluded_ancestors: Iterable[str] = DEFAULT_EXCLUDED_ANCESTORS,
) -> bool:
    """True if the element sits in a repeated content block or in a boilerplate widget"""
    if nested_pattern.search(ancestors):
        return True
    return any(marker in ancestors for marker in excluded_ancestors)


def classify_elements(
    elements: Iterable[ElementSnapshot],
    nested_container: str = DEFAULT_NESTED_CONTAINER,
    excluded_ancestors: Iterable[str] = DEFAULT_EXCLUDED_ANCESTORS,
) -> Dict[str, str]:
    """
    Group element text into subsections.

    Each heading opens a subsection; paragraphs and list items that follow are
    appended to its body until the next heading. Text found before the first
    heading is carried into the first subsection.

    Args:
        elements: Snapshots in document order
        nested_container: Ancestor marker of the content container
        excluded_ancestors: Substrings of the ancestor chain that mark boilerplate

    Returns:
        Mapping of heading text to stripped body text
    """
    nested_pattern = nested_container_pattern(nested_container)
    excluded: List[str] = list(excluded_ancestors)

    subsections: Dict[str, str] = {}
    heading = ""
    body = ""

    for element in elements:
        # Ads and empty wrappers
        if not element.text:
            continue
        if is_excluded(element.ancestors, nested_pattern, excluded):
            continue

        if element.tag == HEADING_TAG:
            if heading:
                subsections[heading] = body.strip()
                body = ""
            heading = element.text
        elif element.tag == LIST_ITEM_TAG:
            body += "\n- " + element.text
        elif element.tag == PARAGRAPH_TAG:
            body += "\n" + element.text

    if heading:
        subsections[heading] = body.strip()

    return subsections
