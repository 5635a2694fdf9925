"""Pytest configuration and fixtures."""
import asyncio
from typing import List, Optional

import pytest

from api.schemas.requests import GenerationRequest
from generator.tasks import GenerationTask
from shared.config import Settings
from shared.errors import ProviderError
from storage.job_store import JobStore


class FakeProvider:
    """Provider double that returns canned text and records every call."""

    name = "fake"
    label = "Fake"

    def __init__(self, text: str = "Article body.", fail_on: Optional[int] = None, error: Exception = None):
        self.text = text
        self.fail_on = fail_on
        self.error = error or ProviderError("Fake API error: quota exceeded", provider_name="fake")
        self.calls: List[tuple] = []
        self.started = asyncio.Event()
        self.release: Optional[asyncio.Event] = None
        self.on_call = None

    def hold(self):
        """Make generate() wait until release is set."""
        self.release = asyncio.Event()
        return self.release

    async def generate(self, keyword: str, url: str, api_key: str) -> str:
        self.calls.append((keyword, url, api_key))
        self.started.set()
        if self.on_call:
            await self.on_call(len(self.calls))
        if self.release is not None:
            await self.release.wait()
        if self.fail_on == len(self.calls):
            raise self.error
        return f"{self.text} ({keyword} #{len(self.calls)})"


@pytest.fixture
def test_settings(tmp_path):
    """Settings writing into a temporary directory."""
    return Settings(
        output_dir=str(tmp_path / "output"),
        provider_timeout=5,
        job_retention_seconds=0,
        poll_interval=0.01
    )


@pytest.fixture
def store():
    """Create an empty job store."""
    return JobStore()


@pytest.fixture
def fake_provider():
    """Create a provider double that always succeeds."""
    return FakeProvider()


@pytest.fixture
def make_request():
    """Build the generator task of a validated request with n keywords."""
    def _make(keywords: int = 1, per_keyword: int = 1, provider: str = "gemini") -> GenerationTask:
        return GenerationRequest(
            keywords=[
                {"keyword": f"keyword {i}", "url": f"https://example.com/{i}"}
                for i in range(1, keywords + 1)
            ],
            api_provider=provider,
            api_key="secret-key",
            articles_per_keyword=per_keyword
        ).to_task()
    return _make


@pytest.fixture
def sample_payload():
    """Create a sample generation request body."""
    return {
        "keywords": [
            {"keyword": "SEO optimization", "url": "https://example.com"},
            {"keyword": "Content marketing", "url": "https://example.com/blog"}
        ],
        "api_provider": "groq",
        "api_key": "secret-key",
        "articles_per_keyword": 1
    }
