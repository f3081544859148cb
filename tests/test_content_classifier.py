# tests/test_content_classifier.py
"""Tests for the subsection classification pass."""
from guideline_scraper.lib.content_classifier import (
    build_content_selector,
    classify_elements,
    is_excluded,
    nested_container_pattern,
)
from guideline_scraper.lib.html_document import HtmlDocument
from guideline_scraper.lib.models import ElementSnapshot

ROOT = "DIV.content BODY. HTML. "
SELECTOR = "div.content li, div.content h2, div.content p"


def snap(tag, text, ancestors=ROOT):
    return ElementSnapshot(tag=tag, text=text, ancestors=ancestors)


class TestClassifyElements:
    """Tests for classify_elements on hand-built snapshots."""

    def test_headings_split_subsections_and_last_is_kept(self):
        elements = [
            snap("H2", "A"),
            snap("P", "x"),
            snap("LI", "y", "UL. " + ROOT),
            snap("H2", "B"),
            snap("P", "z"),
        ]

        assert classify_elements(elements) == {"A": "x\n- y", "B": "z"}

    def test_nested_content_container_is_skipped(self):
        elements = [
            snap("H2", "A"),
            snap("P", "kept"),
            snap("P", "duplicate", "DIV.content " + ROOT),
        ]

        assert classify_elements(elements) == {"A": "kept"}

    def test_denylisted_ancestors_are_skipped(self):
        elements = [
            snap("H2", "A"),
            snap("P", "body"),
            snap("LI", "Smith J. 2020", "OL. DIV.references " + ROOT),
            snap("LI", "Jump to", "UL. DIV.acces-list-container " + ROOT),
            snap("P", "Contents", "DIV.tableofcontents " + ROOT),
        ]

        assert classify_elements(elements) == {"A": "body"}

    def test_empty_text_is_ignored(self):
        elements = [snap("H2", "A"), snap("P", ""), snap("H2", ""), snap("P", "x")]

        assert classify_elements(elements) == {"A": "x"}

    def test_text_before_first_heading_joins_first_subsection(self):
        elements = [snap("P", "intro"), snap("H2", "A"), snap("P", "x")]

        assert classify_elements(elements) == {"A": "intro\nx"}

    def test_no_heading_yields_empty_mapping(self):
        assert classify_elements([snap("P", "x"), snap("LI", "y")]) == {}

    def test_heading_without_body(self):
        assert classify_elements([snap("H2", "A"), snap("H2", "B")]) == {"A": "", "B": ""}

    def test_unknown_tags_are_ignored(self):
        elements = [snap("H2", "A"), snap("SPAN", "noise"), snap("P", "x")]

        assert classify_elements(elements) == {"A": "x"}

    def test_custom_container_marker(self):
        elements = [
            snap("H2", "A", "SECTION. DIV.aem-GridColumn BODY. "),
            snap("P", "x", "SECTION. DIV.aem-GridColumn BODY. "),
            snap("P", "dup", "SECTION. DIV.aem-GridColumn DIV.aem-GridColumn BODY. "),
        ]

        result = classify_elements(elements, nested_container="DIV.aem-GridColumn")

        assert result == {"A": "x"}


class TestExclusionHelpers:
    def test_single_container_is_not_nested(self):
        assert not is_excluded(ROOT, nested_container_pattern())

    def test_container_twice_is_nested(self):
        assert is_excluded("P. DIV.content DIV.content BODY. ", nested_container_pattern())

    def test_build_content_selector_keeps_element_order(self):
        assert build_content_selector("div.content", ["li", "h2", "p"]) == SELECTOR


class TestHtmlClassification:
    """Classification over snapshots taken from parsed HTML."""

    PAGE = """
    <html><body>
      <div class="content">
        <h2>A</h2>
        <p>x</p>
        <ul><li>y</li></ul>
        <div class="content"><p>repeated block</p></div>
        <div class="references"><ol><li>Ref 1</li></ol></div>
        <h2>B</h2>
        <p>z</p>
        <p>   </p>
      </div>
    </body></html>
    """

    def test_snapshots_follow_document_order(self):
        document = HtmlDocument(self.PAGE)

        tags = [el.tag for el in document.snapshot_elements(SELECTOR)]

        assert tags == ["H2", "P", "LI", "P", "LI", "H2", "P", "P"]

    def test_ancestor_chain_matches_page_format(self):
        document = HtmlDocument(self.PAGE)

        first_item = document.snapshot_elements("div.content li")[0]

        assert first_item.ancestors == "UL. DIV.content BODY. HTML. "

    def test_classifies_page(self):
        document = HtmlDocument(self.PAGE)

        result = classify_elements(document.snapshot_elements(SELECTOR))

        assert result == {"A": "x\n- y", "B": "z"}

    def test_classification_is_idempotent(self):
        document = HtmlDocument(self.PAGE)

        first = classify_elements(document.snapshot_elements(SELECTOR))
        second = classify_elements(document.snapshot_elements(SELECTOR))

        assert first == second
