"""
linkshelf: save links and have them categorized automatically
"""
from .models import CanonicalUrl, PageMetadata, ExtractedPage, IngestionStage, IngestionResult, LinkRecord, Owner
from .taxonomy import CategoryTaxonomy, DEFAULT_TAXONOMY
from .url_validator import UrlValidator, normalize_url
from .page_fetcher import PageFetcher
from .content_extractor import ContentExtractor
from .classification_service import CategoryClassifier
from .link_store import LinkStore, SqliteLinkStore
from .link_service import LinkService

__all__ = [
    'CanonicalUrl',
    'PageMetadata',
    'ExtractedPage',
    'IngestionStage',
    'IngestionResult',
    'LinkRecord',
    'Owner',
    'CategoryTaxonomy',
    'DEFAULT_TAXONOMY',
    'UrlValidator',
    'normalize_url',
    'PageFetcher',
    'ContentExtractor',
    'CategoryClassifier',
    'LinkStore',
    'SqliteLinkStore',
    'LinkService',
]
