"""
Error taxonomy for the link ingestion pipeline.

InputError subclasses are rejected before anything is stored. PipelineError
subclasses are absorbed by LinkService and turned into a degraded record.
StoreError subclasses propagate to the caller.
"""
from typing import Optional


class LinkShelfError(Exception):
    """Base class for all linkshelf errors"""

    default_message = "요청을 처리하는 중 오류가 발생했습니다."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InputError(LinkShelfError):
    """Rejected request; no record is created."""


class InvalidUrlFormatError(InputError):
    default_message = "유효하지 않은 URL 형식입니다. 올바른 웹사이트 주소를 입력해주세요."


class UrlTooLongError(InputError):
    def __init__(self, max_length: int = 2048):
        self.max_length = max_length
        super().__init__(f"URL은 {max_length}자를 초과할 수 없습니다.")


class DuplicateLinkError(InputError):
    default_message = "이미 등록된 링크입니다."


class InvalidCategoryError(InputError):
    def __init__(self, category: str):
        self.category = category
        super().__init__(f"유효하지 않은 카테고리입니다: {category}")


class LinkNotFoundError(InputError):
    default_message = "링크를 찾을 수 없습니다."


class PipelineError(LinkShelfError):
    """Enrichment failure after validation; degrades the record."""


class FetchError(PipelineError):
    """Base class for page fetch failures."""

    def __init__(self, message: Optional[str] = None, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class DomainNotFoundError(FetchError):
    default_message = "존재하지 않는 도메인입니다."


class FetchTimeoutError(FetchError):
    default_message = "웹페이지 로딩 시간이 초과되었습니다."


class AccessDeniedError(FetchError):
    default_message = "해당 웹사이트에 접근이 거부되었습니다."


class CrawlFailureError(FetchError):
    def __init__(self, detail: str, url: Optional[str] = None):
        self.detail = detail
        super().__init__(f"웹페이지를 크롤링하는 중 오류가 발생했습니다: {detail}", url=url)


class ExtractionFailureError(PipelineError):
    default_message = "HTML에서 텍스트를 추출하는 중 오류가 발생했습니다."


class StoreError(LinkShelfError):
    """LinkStore failure surfaced to the caller."""


class LinkSaveFailedError(StoreError):
    default_message = "링크를 저장하는 중 오류가 발생했습니다."


class LinkQueryFailedError(StoreError):
    default_message = "링크를 조회하는 중 오류가 발생했습니다."
