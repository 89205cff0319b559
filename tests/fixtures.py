"""
Shared test fixtures for ingestion and classification tests
"""

from typing import Dict, List, Optional

from linkshelf.errors import AccessDeniedError, FetchError
from linkshelf.llm.base import LLMProvider, LLMResponse
from linkshelf.models import Owner


class MockLLMProvider(LLMProvider):
    """LLM provider returning canned completions"""

    def __init__(self, content: str = "기타", model: str = "mock-model"):
        super().__init__("test_key", model)
        self.content = content
        self.calls: List[Dict] = []

    def validate_config(self) -> bool:
        return True

    async def generate(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, **kwargs})
        return LLMResponse(content=self.content, model=self.model)


class FailingLLMProvider(LLMProvider):
    """LLM provider whose every call fails"""

    def __init__(self, error: Optional[Exception] = None):
        super().__init__("test_key", "failing-model")
        self.error = error or RuntimeError("LLM backend unavailable")

    def validate_config(self) -> bool:
        return True

    async def generate(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        raise self.error


class MockPageFetcher:
    """Page fetcher serving HTML from a dict, or raising FetchErrors"""

    def __init__(self, pages: Optional[Dict[str, str]] = None,
                 errors: Optional[Dict[str, FetchError]] = None,
                 default_html: Optional[str] = None):
        self.pages = pages or {}
        self.errors = errors or {}
        self.default_html = default_html if default_html is not None else SAMPLE_ARTICLE_HTML
        self.fetched: List[str] = []

    async def fetch(self, url: str) -> str:
        self.fetched.append(url)
        if url in self.errors:
            raise self.errors[url]
        return self.pages.get(url, self.default_html)


def create_owner(owner_id: int = 1, nickname: str = "tester") -> Owner:
    """Create a test owner"""
    return Owner(id=owner_id, nickname=nickname, image_uri=f"https://img.test/{owner_id}.png")


def access_denied(url: str) -> AccessDeniedError:
    return AccessDeniedError(url=url)


SAMPLE_ARTICLE_HTML = """<!DOCTYPE html>
<html>
<head>
    <title>Understanding Python Generators</title>
    <meta name="description" content="A practical guide to generators and lazy iteration in Python.">
    <meta property="og:image" content="/images/generators.png">
</head>
<body>
    <nav class="site-nav"><a href="/">Home</a><a href="/blog">Blog</a></nav>
    <article>
        <h1>Understanding Python Generators</h1>
        <p>Generators let you iterate over data lazily, producing one value at a time instead of building a list in memory.</p>
        <p>They are defined with the yield keyword and resume where they left off on each call to next.</p>
        <pre><code>def count(n):
    for i in range(n):
        yield i</code></pre>
    </article>
    <footer>Copyright 2024</footer>
</body>
</html>
"""

MDN_ARRAY_MAP_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <title>Array.prototype.map() - JavaScript | MDN</title>
    <meta name="description" content="The map() method of Array instances creates a new array populated with the results of calling a provided function on every element in the calling array.">
    <meta property="og:title" content="Array.prototype.map() - JavaScript | MDN">
</head>
<body>
    <header class="top-navigation">MDN Web Docs</header>
    <main id="content">
        <h1>Array.prototype.map()</h1>
        <p>The map() method of Array instances creates a new array populated with the results of calling a provided function on every element in the calling array.</p>
        <pre><code>const array1 = [1, 4, 9, 16];
const map1 = array1.map((x) => x * 2);</code></pre>
    </main>
</body>
</html>
"""

EMPTY_HTML = "<html><head></head><body></body></html>"
