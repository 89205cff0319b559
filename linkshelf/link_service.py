"""
Link ingestion pipeline and owner-scoped link queries
"""
from typing import Any, Dict, List, Optional, Tuple

from .classification_service import CategoryClassifier
from .config import Config
from .content_extractor import ContentExtractor
from .errors import (
    DuplicateLinkError,
    InputError,
    InvalidCategoryError,
    LinkNotFoundError,
    PipelineError,
)
from .link_store import LinkStore, SqliteLinkStore
from .llm import LLMProvider
from .logging_config import get_logger
from .models import CanonicalUrl, IngestionResult, IngestionStage, LinkRecord, Owner, PageMetadata
from .page_fetcher import BROWSER_HEADERS, PageFetcher
from .taxonomy import CategoryTaxonomy
from .url_validator import UrlValidator

logger = get_logger("link_service")

DEFAULT_LIMIT = 5


class LinkService:
    """Turns a submitted URL into a stored, categorized link and serves the owner's links"""

    def __init__(
        self,
        store: LinkStore,
        classifier: Optional[CategoryClassifier] = None,
        validator: Optional[UrlValidator] = None,
        fetcher: Optional[PageFetcher] = None,
        extractor: Optional[ContentExtractor] = None,
        min_content_chars: int = 50,
    ):
        self.store = store
        self.classifier = classifier or CategoryClassifier()
        self.validator = validator or UrlValidator()
        self.fetcher = fetcher or PageFetcher()
        self.extractor = extractor or ContentExtractor()
        self.min_content_chars = min_content_chars

    @property
    def taxonomy(self) -> CategoryTaxonomy:
        return self.classifier.taxonomy

    @classmethod
    def from_config(
        cls,
        config: Config,
        store: Optional[LinkStore] = None,
        llm_provider: Optional[LLMProvider] = None,
    ) -> "LinkService":
        """Wire up the pipeline from configuration."""
        classifier = CategoryClassifier(
            llm_provider=llm_provider,
            taxonomy=config.classification.build_taxonomy(),
            temperature=config.classification.temperature,
            max_tokens=config.classification.max_tokens,
        )
        return cls(
            store=store or SqliteLinkStore(config.storage.db_path),
            classifier=classifier,
            validator=UrlValidator(max_length=config.storage.max_url_length),
            fetcher=PageFetcher(
                timeout=config.fetch.timeout,
                max_redirects=config.fetch.max_redirects,
                headers={**BROWSER_HEADERS, "Accept-Language": config.fetch.accept_language},
            ),
            extractor=ContentExtractor(
                parser=config.extraction.parser,
                max_chars=config.extraction.max_chars,
            ),
            min_content_chars=config.extraction.min_content_chars,
        )

    # --- ingestion --------------------------------------------------------

    async def ingest(self, owner: Owner, raw_url: str) -> IngestionResult:
        """
        Validate, fetch, extract, classify and store one submission.

        Once the URL is valid and not a duplicate a record is always created;
        fetch and extraction failures only downgrade its category.

        Raises:
            InvalidUrlFormatError, UrlTooLongError, DuplicateLinkError,
            LinkSaveFailedError, LinkQueryFailedError
        """
        self._log_stage(raw_url, IngestionStage.VALIDATING)
        try:
            url = self.validator.validate(raw_url)
            if self.store.find_by_owner_and_url(owner, url):
                raise DuplicateLinkError()
        except InputError as e:
            logger.info("Rejected submission %r from owner %s: %s", raw_url, owner.id, e)
            self._log_stage(raw_url, IngestionStage.REJECTED_INPUT)
            raise

        category, metadata, stage, reason = await self._analyze(url)

        self._log_stage(url.url, IngestionStage.PERSISTING)
        record = self.store.create(owner, url, category, metadata)
        self._log_stage(url.url, stage)
        logger.info("Saved link %s for owner %s as %r", url.url, owner.id, category)
        return IngestionResult(record=record, stage=stage, reason=reason)

    async def _analyze(self, url: CanonicalUrl) -> Tuple[str, PageMetadata, IngestionStage, Optional[str]]:
        """Fetch, extract and classify; failures map to a pipeline-status category."""
        try:
            self._log_stage(url.url, IngestionStage.FETCHING)
            html = await self.fetcher.fetch(url.url)
            self._log_stage(url.url, IngestionStage.EXTRACTING)
            page = self.extractor.extract(html, url.url)
        except PipelineError as e:
            logger.warning("Analysis failed for %s, saving as %r: %s", url.url, self.taxonomy.analysis_failed, e)
            return self.taxonomy.analysis_failed, PageMetadata.placeholder(), IngestionStage.DEGRADED, e.message

        if len(page.text) < self.min_content_chars:
            logger.warning(
                "Only %d characters extracted from %s, saving as %r",
                len(page.text), url.url, self.taxonomy.insufficient_content,
            )
            return (self.taxonomy.insufficient_content, page.metadata, IngestionStage.DEGRADED,
                    f"extracted text shorter than {self.min_content_chars} characters")

        self._log_stage(url.url, IngestionStage.CLASSIFYING)
        category = await self.classifier.classify(page.text, url.url)
        return category, page.metadata, IngestionStage.DONE, None

    @staticmethod
    def _log_stage(url: str, stage: IngestionStage) -> None:
        logger.debug("%s -> %s", url, stage.value)

    async def create_link(self, owner: Owner, url: str) -> Dict[str, Any]:
        """Ingest a URL and return the stored link in response shape."""
        result = await self.ingest(owner, url)
        return result.record.to_response()

    # --- queries ----------------------------------------------------------

    @staticmethod
    def _responses(records: List[LinkRecord]) -> List[Dict[str, Any]]:
        return [record.to_response() for record in records]

    @staticmethod
    def _limit(limit: Optional[int]) -> int:
        return limit if limit and limit > 0 else DEFAULT_LIMIT

    def list_links(self, owner: Owner) -> List[Dict[str, Any]]:
        """All of the owner's links, newest first."""
        return self._responses(self.store.list_by_owner(owner))

    def list_links_by_category(self, owner: Owner, category: str) -> List[Dict[str, Any]]:
        if not self.taxonomy.is_valid(category):
            raise InvalidCategoryError(category)
        return self._responses(self.store.list_by_owner(owner, category=category))

    def recent_links(self, owner: Owner, limit: Optional[int] = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        return self._responses(self.store.list_by_owner(owner, limit=self._limit(limit)))

    def recently_opened_links(self, owner: Owner, limit: Optional[int] = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        return self._responses(self.store.list_recently_opened(owner, limit=self._limit(limit)))

    def count_links(self, owner: Owner) -> Dict[str, int]:
        return {"total": self.store.count_by_owner(owner)}

    def get_link(self, owner: Owner, link_id: int) -> Dict[str, Any]:
        """Fetch one link and record that the owner opened it."""
        record = self.store.get(owner, link_id)
        if record is None:
            raise LinkNotFoundError()
        self.store.record_open(owner, link_id)
        return record.to_response()

    def delete_link(self, owner: Owner, link_id: int) -> None:
        if not self.store.delete(owner, link_id):
            raise LinkNotFoundError()
        logger.info("Deleted link %s for owner %s", link_id, owner.id)
