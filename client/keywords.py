"""Parsing of keyword input for the generation client."""
from typing import Dict, List


def parse_keyword_lines(text: str) -> List[Dict[str, str]]:
    """
    Parse one "keyword | URL" pair per line.

    Blank lines are skipped. Raises ValueError naming the first line that
    does not split into exactly two parts.
    """
    entries = []
    for line in text.splitlines():
        if not line.strip():
            continue
        parts = [part.strip() for part in line.split("|")]
        if len(parts) != 2:
            raise ValueError(f'Invalid format: "{line.strip()}". Use: keyword | URL')
        entries.append({"keyword": parts[0], "url": parts[1]})
    return entries


def keywords_with_url(text: str, url: str) -> List[Dict[str, str]]:
    """Pair every non-blank keyword line with the same URL."""
    url = url.strip()
    if not url:
        raise ValueError("URL is required")
    return [{"keyword": line.strip(), "url": url} for line in text.splitlines() if line.strip()]
