"""Request schemas for API endpoints."""
from typing import List
from pydantic import BaseModel, Field, SecretStr, field_validator

from generator.providers import ProviderName
from generator.tasks import GenerationTask
from shared.utils import validate_url as is_valid_url


class KeywordEntry(BaseModel):
    """A keyword and the website the article should support."""
    keyword: str = Field(..., min_length=1, description="Keyword the article is written around")
    url: str = Field(..., description="Website URL the article is written for")

    @field_validator('keyword')
    @classmethod
    def validate_keyword(cls, v: str) -> str:
        """Reject blank keywords."""
        v = v.strip()
        if not v:
            raise ValueError('Keyword must not be blank')
        return v

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format."""
        v = v.strip()
        if not is_valid_url(v):
            raise ValueError('URL must be a valid http:// or https:// address')
        return v


class GenerationRequest(BaseModel):
    """Request schema for starting an article generation job."""
    keywords: List[KeywordEntry] = Field(
        ...,
        min_length=1,
        description="Keyword/URL pairs, generated in order"
    )
    api_provider: ProviderName = Field(..., description="Text-generation provider")
    api_key: SecretStr = Field(..., description="Provider API key, used only for this job")
    articles_per_keyword: int = Field(
        default=1,
        ge=1,
        strict=True,
        description="Articles to generate per keyword; the upper bound is a server setting"
    )

    @field_validator('api_key')
    @classmethod
    def validate_api_key(cls, v: SecretStr) -> SecretStr:
        """Require a non-empty credential."""
        if not v.get_secret_value().strip():
            raise ValueError('API key is required')
        return v

    @property
    def total_articles(self) -> int:
        return len(self.keywords) * self.articles_per_keyword

    def to_task(self) -> GenerationTask:
        """Hand the validated request to the generator."""
        return GenerationTask(
            provider=self.api_provider.value,
            entries=[(entry.keyword, entry.url) for entry in self.keywords],
            articles_per_keyword=self.articles_per_keyword,
            api_key=self.api_key.get_secret_value()
        )
