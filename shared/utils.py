"""Shared utility functions."""
import re
import uuid
from datetime import datetime, timezone
from urllib.parse import urlparse


def generate_job_id() -> str:
    """Generate a unique job ID."""
    return f"job_{uuid.uuid4().hex[:12]}"


def generate_log_id() -> str:
    """Generate a short ID for a client log entry."""
    return uuid.uuid4().hex[:9]


def get_utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def validate_url(url: str) -> bool:
    """Validate that a URL is properly formatted."""
    try:
        result = urlparse(url)
        return all([result.scheme in ('http', 'https'), result.netloc])
    except ValueError:
        return False


def sanitize_keyword(keyword: str, max_length: int = 50) -> str:
    """Make a keyword safe for use in a folder name."""
    return re.sub(r"[^a-zA-Z0-9]", "_", keyword)[:max_length]

