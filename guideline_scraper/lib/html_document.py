#!/usr/bin/env python3
"""
HTML Document

Read-only page capabilities over a saved HTML string, parsed with
BeautifulSoup. Mirrors the read side of PageDriver so the same extraction
code can run on saved pages without a browser.
"""

from typing import List, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from .models import ElementSnapshot


class HtmlDocument:
    def __init__(self, html: str, url: str = ""):
        self.url = url
        self.soup = BeautifulSoup(html, "html.parser")

    @classmethod
    def from_file(cls, path: str, url: str = "") -> "HtmlDocument":
        with open(path, "r", encoding="utf-8") as f:
            return cls(f.read(), url=url)

    def exists(self, selector: str) -> bool:
        return self.soup.select_one(selector) is not None

    def get_links(self, selector: str) -> List[Tuple[str, str]]:
        """(text, absolute href) for every element matching the selector"""
        links = []
        for element in self.soup.select(selector):
            href = element.get("href")
            links.append(
                (element.get_text(), urljoin(self.url, href) if href else "")
            )
        return links

    def snapshot_elements(self, selector: str) -> List[ElementSnapshot]:
        """Snapshot matched elements in document order"""
        return [
            ElementSnapshot(
                tag=element.name.upper(),
                text=element.get_text().strip(),
                ancestors=self._ancestor_chain(element),
            )
            for element in self.soup.select(selector)
        ]

    def _ancestor_chain(self, element: Tag) -> str:
        """Same "TAG.class " chain the in-page snapshot script builds"""
        chain = ""
        for parent in element.parents:
            if isinstance(parent, BeautifulSoup):
                break
            classes = " ".join(parent.get("class", []))
            chain += f"{parent.name.upper()}.{classes} "
        return chain
