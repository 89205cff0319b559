"""
Category classification: one LLM call followed by deterministic fallbacks
"""
import re
from typing import Callable, Optional, Sequence
from urllib.parse import urlsplit

from .llm import LLMProvider, LLMProviderFactory
from .logging_config import get_logger
from .taxonomy import DEFAULT_TAXONOMY, CategoryTaxonomy

logger = get_logger("classification_service")

# (cleaned AI response or None, URL hint or None, taxonomy) -> category or None
Strategy = Callable[[Optional[str], Optional[str], CategoryTaxonomy], Optional[str]]

SURROUNDING_CHARS = " \t\"'`“”‘’「」『』[]()*-•.,!?:;"
ELABORATION = re.compile(r"\.\s*\S")


def clean_response(text: Optional[str]) -> str:
    """
    Reduce a raw completion to a bare category name.

    Keeps the first non-empty line and the answer after a "label:" prefix.
    A trailing explanation after a period is dropped, as are quotes and
    punctuation around the name.
    """
    if not text:
        return ""

    line = next((l for l in text.strip().splitlines() if l.strip()), "")
    line = line.strip().strip(SURROUNDING_CHARS)

    if ":" in line:
        answer = line.split(":", 1)[1].strip(SURROUNDING_CHARS)
        if answer:
            line = answer

    match = ELABORATION.search(line)
    if match:
        line = line[:match.start()]

    return line.strip(SURROUNDING_CHARS)


def _normalize(text: str) -> str:
    return re.sub(r"\s+", "", text.lower())


def exact_match(response, hint, taxonomy):
    if response and response in taxonomy.categories:
        return response
    return None


def fuzzy_match(response, hint, taxonomy):
    """Case and whitespace insensitive containment, in either direction."""
    normalized = _normalize(response or "")
    if not normalized:
        return None
    for category in taxonomy.categories:
        normalized_category = _normalize(category)
        if normalized_category in normalized or normalized in normalized_category:
            return category
    return None


def keyword_match(response, hint, taxonomy):
    if not response:
        return None
    for category, pattern in taxonomy.keyword_patterns:
        if pattern.search(response):
            return category
    return None


def url_hint(response, hint, taxonomy):
    if hint and hint in taxonomy.categories:
        return hint
    return None


def default_category(response, hint, taxonomy):
    return taxonomy.default_category


DEFAULT_STRATEGIES: Sequence[Strategy] = (
    exact_match,
    fuzzy_match,
    keyword_match,
    url_hint,
    default_category,
)


class CategoryClassifier:
    """Assigns exactly one category to extracted page text"""

    def __init__(
        self,
        llm_provider: Optional[LLMProvider] = None,
        taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
        temperature: float = 0.1,
        max_tokens: int = 30,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
    ):
        """
        Args:
            llm_provider: classifier backend; built from the environment on first use when omitted
            taxonomy: category vocabulary and fallback tables
            temperature: sampling temperature for the completion call
            max_tokens: completion token budget
            strategies: ordered fallback chain, first non-None result wins
        """
        self.llm_provider = llm_provider
        self.taxonomy = taxonomy
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.strategies = tuple(strategies)

    async def classify(self, text: str, url: str) -> str:
        """Return one category for the page; never raises for backend failures."""
        hint = self.estimate_from_url(url)
        response = await self._ask_llm(text, url, hint)
        return self.resolve_category(clean_response(response) if response else None, hint)

    def resolve_category(self, response: Optional[str], hint: Optional[str]) -> str:
        """Walk the fallback chain for a cleaned AI response and URL hint."""
        for strategy in self.strategies:
            category = strategy(response, hint, self.taxonomy)
            if category:
                if category != response:
                    logger.debug("Mapped AI response %r to %r via %s", response, category, strategy.__name__)
                return category
        return self.taxonomy.default_category

    def estimate_from_url(self, url: str) -> Optional[str]:
        """Guess a category from the domain, then the path, of a URL."""
        try:
            parts = urlsplit(url if url.startswith("http") else f"https://{url}")
            domain = (parts.hostname or "").lower()
            path = parts.path.lower()
        except ValueError as e:
            logger.debug("Could not parse URL %s: %s", url, e)
            return None

        for category, keywords in self.taxonomy.domain_keywords:
            if any(keyword in domain for keyword in keywords):
                return category

        for category, keywords in self.taxonomy.path_keywords:
            if any(keyword in path for keyword in keywords):
                return category

        return None

    def get_system_prompt(self) -> str:
        categories = ", ".join(self.taxonomy.categories)
        return (
            "You classify web content for software developers. "
            "Analyze the page text, URL and domain, paying attention to code, technical terms, "
            "framework and library names. Weigh how often and how prominently topics appear. "
            f"Choose exactly one category from this list: {categories}. "
            "Reply with the category name only, with no explanation or extra text."
        )

    def get_user_prompt(self, text: str, url: str, hint: Optional[str]) -> str:
        parts = urlsplit(url if url.startswith("http") else f"https://{url}")
        category_lines = "\n".join(
            f"- {category}: {self.taxonomy.describe(category)}" if self.taxonomy.describe(category)
            else f"- {category}"
            for category in self.taxonomy.categories
        )
        return (
            "URL information:\n"
            f"Full URL: {url}\n"
            f"Domain: {parts.hostname or ''}\n"
            f"Path: {parts.path}\n"
            f"Category guessed from URL: {hint or 'unknown'}\n\n"
            "Classify the following page content into the single best category:\n\n"
            f"{text}\n\n"
            f"Categories:\n{category_lines}\n\n"
            "Return only the exact category name."
        )

    async def _ask_llm(self, text: str, url: str, hint: Optional[str]) -> Optional[str]:
        """Run the completion call; any failure means no AI opinion."""
        try:
            if self.llm_provider is None:
                self.llm_provider = LLMProviderFactory.from_env()

            # The provider is shared by concurrent submissions; never close it here
            response = await self.llm_provider.generate(
                self.get_user_prompt(text, url, hint),
                system_prompt=self.get_system_prompt(),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            return response.content
        except Exception as e:
            logger.warning("AI classification failed for %s, using fallbacks: %s", url, e)
            return None
