from enum import Enum
from typing import List, Set

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from aipulse.utils.date_format import parse_iso

ARTICLE_ID_PATTERN = r"^\d{8}-\d{3}$"

_HTTP_URL = TypeAdapter(HttpUrl)


def _check_absolute_url(v: str) -> str:
    # valida mas mantém a string original (HttpUrl normaliza barras finais)
    try:
        _HTTP_URL.validate_python(v)
    except ValidationError:
        raise ValueError(f"not an absolute http(s) URL: {v!r}") from None
    return v


def _check_timestamp(v: str, field: str) -> str:
    if parse_iso(v) is None:
        raise ValueError(f"{field} is not an ISO-8601 timestamp: {v!r}")
    return v


class Category(str, Enum):
    model = "Model"
    service = "Service"
    other = "Other"


class Importance(str, Enum):
    high = "high"
    normal = "normal"


class _CamelModel(BaseModel):
    # JSON usa camelCase; atributos Python em snake_case
    model_config = ConfigDict(populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class NewsArticle(_CamelModel):
    id: str = Field(pattern=ARTICLE_ID_PATTERN)
    title: str
    url: str
    source_name: str = Field(alias="sourceName")
    category: Category
    published_at: str = Field(alias="publishedAt")
    summary: str
    importance: Importance

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, v: str) -> str:
        return _check_absolute_url(v)

    @field_validator("published_at")
    @classmethod
    def _parseable_published_at(cls, v: str) -> str:
        return _check_timestamp(v, "publishedAt")

    @property
    def is_high_importance(self) -> bool:
        return self.importance is Importance.high


class NewsSnapshot(_CamelModel):
    last_updated: str = Field(alias="lastUpdated")
    news: List[NewsArticle] = Field(default_factory=list)

    @field_validator("last_updated")
    @classmethod
    def _parseable_last_updated(cls, v: str) -> str:
        return _check_timestamp(v, "lastUpdated")

    @model_validator(mode="after")
    def _unique_ids_and_urls(self) -> "NewsSnapshot":
        seen_ids: Set[str] = set()
        seen_urls: Set[str] = set()
        for article in self.news:
            if article.id in seen_ids:
                raise ValueError(f"duplicate article id: {article.id}")
            if article.url in seen_urls:
                raise ValueError(f"duplicate article url: {article.url}")
            seen_ids.add(article.id)
            seen_urls.add(article.url)
        return self

    @property
    def urls(self) -> Set[str]:
        return {a.url for a in self.news}


class SourceEntry(_CamelModel):
    url: str
    source_name: str = Field(alias="sourceName")

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, v: str) -> str:
        return _check_absolute_url(v)


class Whitelist(_CamelModel):
    sources: List[SourceEntry] = Field(default_factory=list)


class SessionPointer(_CamelModel):
    session_id: str = Field(alias="sessionId", min_length=1)
    last_run: str = Field(alias="lastRun")
