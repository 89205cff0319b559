"""
Main-content and metadata extraction from fetched HTML
"""
import re
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

from .errors import ExtractionFailureError
from .logging_config import get_logger
from .models import DEFAULT_THUMBNAIL, NO_TITLE, ExtractedPage, PageMetadata

logger = get_logger("content_extractor")

NOISE_KEYWORDS = ("ads", "banner", "comment", "cookie", "popup", "sidebar", "footer", "header", "nav", "menu")

NOISE_SELECTOR = ", ".join(
    ["script", "style", "svg", "iframe", "nav", "footer", "header", "aside", "noscript",
     '[role="complementary"]', '[aria-hidden="true"]']
    + [f'[class*="{k}"], [id*="{k}"]' for k in NOISE_KEYWORDS]
)

TECH_SELECTORS = (
    ".documentation",
    ".markdown-body",
    ".readme",
    ".wiki-content",
    '[class*="docs"]',
    '[id*="docs"]',
    '[class*="api"]',
    '[id*="api"]',
    '[class*="tech"]',
    '[id*="tech"]',
    ".code-example",
    '[class*="tutorial"]',
)

CONTENT_SELECTORS = (
    "article",
    "main",
    '[role="main"]',
    "#content",
    ".content",
    '[class*="content-main"]',
    '[class*="main-content"]',
    ".post",
    ".entry",
    '[class*="article"]',
    '[id*="article"]',
    '[class*="post"]',
    '[id*="post"]',
    '[class*="blog-post"]',
    '[class*="content-body"]',
    ".prose",
)

TITLE_LIMIT = 50
DESCRIPTION_LIMIT = 100
MIN_COMPOSITE_CHARS = 100
MIN_THUMBNAIL_SIZE = 100
SENTENCE_ENDINGS = ".!?"
ELLIPSIS = "..."


def truncate_sentence(text: str, limit: int) -> str:
    """
    Shorten text to at most `limit` characters, preferring a sentence boundary.

    Cuts after the last '.', '!' or '?' inside the limit; without one the text
    is hard-cut and an ellipsis appended.
    """
    if len(text) <= limit:
        return text

    window = text[:limit]
    cut = max(window.rfind(mark) for mark in SENTENCE_ENDINGS)
    if cut >= 0:
        return window[:cut + 1]
    return window + ELLIPSIS


def clean_text(text: str, max_chars: int = 4000) -> str:
    """Normalize whitespace, keep at most one blank line in a row, and cap the length."""
    text = text.replace("\t", " ")
    text = re.sub(r"[^\S\n]+", " ", text)
    text = re.sub(r" ?\n ?", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()[:max_chars]


def _text(element: Tag) -> str:
    return element.get_text(" ", strip=True)


def _squash(text: str) -> str:
    return " ".join(text.split())


def _outermost(elements: List[Tag]) -> List[Tag]:
    """Drop matches nested inside another match so text is not repeated."""
    selected = {id(el) for el in elements}
    return [el for el in elements if not any(id(parent) in selected for parent in el.parents)]


def _dimension(value: Optional[str]) -> int:
    match = re.match(r"\s*(\d+)", value or "")
    return int(match.group(1)) if match else 0


class ContentExtractor:
    """Parses fetched markup into classification text and page metadata"""

    def __init__(self, parser: str = "html.parser", max_chars: int = 4000):
        self.parser = parser
        self.max_chars = max_chars

    def extract(self, html: str, page_url: str) -> ExtractedPage:
        """Extract metadata and classification text from one parsed tree."""
        try:
            soup = BeautifulSoup(html or "", self.parser)
            metadata = self._metadata_from_soup(soup, page_url)
            text = self._text_from_soup(soup)
        except Exception as e:
            logger.error("HTML extraction failed for %s: %s", page_url, e, exc_info=True)
            raise ExtractionFailureError() from e
        return ExtractedPage(text=text, metadata=metadata)

    def extract_text(self, html: str) -> str:
        """Extract the bounded plain-text summary used for classification."""
        return self._text_from_soup(BeautifulSoup(html or "", self.parser))

    def extract_metadata(self, html: str, page_url: str) -> PageMetadata:
        """Extract title, description and thumbnail."""
        return self._metadata_from_soup(BeautifulSoup(html or "", self.parser), page_url)

    # --- text -------------------------------------------------------------

    def _text_from_soup(self, soup: BeautifulSoup) -> str:
        self._strip_noise(soup)

        title = soup.title.get_text(strip=True) if soup.title else ""
        h1 = soup.find("h1")
        heading = _text(h1) if h1 else ""
        description = self._meta(soup, "description") or self._meta(soup, "og:description")
        keywords = self._meta(soup, "keywords")
        og_type = self._meta(soup, "og:type")

        combined = (
            f"Title: {title or heading or self._meta(soup, 'og:title')}\n"
            f"Description: {description}\n"
            f"Keywords: {keywords}\n"
            f"Type: {og_type}\n\n"
            f"{self._main_content(soup)}"
        )
        return clean_text(combined, self.max_chars)

    @staticmethod
    def _strip_noise(soup: BeautifulSoup) -> None:
        for element in soup.select(NOISE_SELECTOR):
            if element.decomposed or element.name in ("html", "body"):
                continue
            element.decompose()

    def _main_content(self, soup: BeautifulSoup) -> str:
        """Run the selector cascade: technical containers, general containers, composite, body."""
        for selectors in (TECH_SELECTORS, CONTENT_SELECTORS):
            content = self._first_matching(soup, selectors)
            if content:
                return content

        composite = self._composite(soup)
        if len(composite) > MIN_COMPOSITE_CHARS:
            return composite

        body = soup.body or soup
        return _text(body)

    @staticmethod
    def _first_matching(soup: BeautifulSoup, selectors: Iterable[str]) -> str:
        for selector in selectors:
            matches = _outermost(soup.select(selector))
            content = "\n\n".join(t for t in (_text(el) for el in matches) if t)
            if content:
                return content
        return ""

    @staticmethod
    def _composite(soup: BeautifulSoup) -> str:
        def collect(selector: str, min_length: int) -> List[str]:
            return [t for t in (_text(el) for el in soup.select(selector)) if len(t) > min_length]

        headings = "\n\n".join(collect("h1, h2, h3", 5))
        paragraphs = "\n\n".join(collect("p", 10))
        list_items = "\n".join(collect("li", 5))
        code_blocks = "\n\n".join(collect("pre, code", 5))
        return f"{headings}\n\n{paragraphs}\n\n{list_items}\n\n{code_blocks}"

    # --- metadata ---------------------------------------------------------

    def _metadata_from_soup(self, soup: BeautifulSoup, page_url: str) -> PageMetadata:
        h1 = soup.find("h1")
        title = (
            self._meta(soup, "og:title")
            or (soup.title.get_text(strip=True) if soup.title else "")
            or (_text(h1) if h1 else "")
        )

        paragraph = soup.find("p")
        description = (
            self._meta(soup, "og:description")
            or self._meta(soup, "description")
            or (_text(paragraph) if paragraph else "")
        )

        return PageMetadata(
            title=truncate_sentence(_squash(title), TITLE_LIMIT) if title else NO_TITLE,
            description=truncate_sentence(_squash(description), DESCRIPTION_LIMIT),
            thumbnail=self._thumbnail(soup, page_url),
        )

    def _thumbnail(self, soup: BeautifulSoup, page_url: str) -> str:
        parts = urlsplit(page_url)
        origin = f"{parts.scheme}://{parts.netloc}/" if parts.scheme and parts.netloc else page_url

        candidates = [self._meta(soup, "og:image"), self._meta(soup, "twitter:image")]
        for img in soup.find_all("img"):
            if _dimension(img.get("width")) > MIN_THUMBNAIL_SIZE or _dimension(img.get("height")) > MIN_THUMBNAIL_SIZE:
                candidates.append((img.get("src") or "").strip())

        for candidate in candidates:
            if not candidate:
                continue
            resolved = urljoin(origin, candidate)
            if resolved.startswith(("http://", "https://")):
                return resolved
        return DEFAULT_THUMBNAIL

    @staticmethod
    def _meta(soup: BeautifulSoup, key: str) -> str:
        """Content of <meta property=key> or <meta name=key>, stripped."""
        for attr in ("property", "name"):
            tag = soup.find("meta", attrs={attr: key})
            if tag and tag.get("content"):
                return tag["content"].strip()
        return ""
