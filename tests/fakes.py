"""Browser-free page driver backed by HTML snippets, plus page builders."""
from guideline_scraper.lib.html_document import HtmlDocument

TOC_URL = "https://www.mayoclinic.org/diseases-conditions/index"
BASE = "https://www.mayoclinic.org/diseases-conditions"
EMPTY_PAGE = "<html><body></body></html>"


class FakeDriver:
    """Serves HtmlDocuments by URL and records navigation."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.fail_urls = set()
        self.history = []
        self.waits = []
        self.current = HtmlDocument(EMPTY_PAGE)

    def goto(self, url):
        self.history.append(url)
        if url in self.fail_urls:
            raise RuntimeError(f"navigation failed: {url}")
        self.current = HtmlDocument(self.pages.get(url, EMPTY_PAGE), url=url)

    def wait(self, seconds):
        self.waits.append(seconds)

    def exists(self, selector):
        return self.current.exists(selector)

    def get_links(self, selector):
        return self.current.get_links(selector)

    def snapshot_elements(self, selector):
        return self.current.snapshot_elements(selector)


def toc_html(links):
    anchors = "".join(f'<li><a href="{url}">{name}</a></li>' for name, url in links)
    return (
        '<html><body><main id="cmp-skip-to-main__content">'
        f"<ul>{anchors}</ul></main></body></html>"
    )


def guideline_html(tabs):
    anchors = "".join(f'<a href="{url}">{label}</a>' for label, url in tabs)
    return f'<html><body><nav id="access-nav">{anchors}</nav></body></html>'


def section_html(inner):
    return f'<html><body><div class="content">{inner}</div></body></html>'


def add_guideline(pages, slug, symptoms_body="<h2>Symptoms</h2><p>Itching.</p>"):
    """Register a guideline page with one Symptoms tab and return its URL."""
    url = f"{BASE}/{slug}/symptoms-causes/syc-1"
    section_url = f"{url}?section=symptoms"
    pages[url] = guideline_html([("Symptoms &amp; causes", section_url)])
    pages[section_url] = section_html(symptoms_body)
    return url
