"""Cleanup of raw provider output before it is written to disk."""
import re

# Characters the downstream consumer rejects, and what replaces them
DISALLOWED_CHARACTERS = {
    "\u2018": "",  # left single quotation mark
    "\u2019": "",  # right single quotation mark
    "\u2014": " ",  # em dash
}

HORIZONTAL_WHITESPACE = re.compile(r"[^\S\n]+")
TITLE_LINE = re.compile(r"^.*\btitle\b.*:.*$", re.IGNORECASE | re.MULTILINE)
TITLE_SENTENCE_LINE = re.compile(r"^.*the title of the article is.*$", re.IGNORECASE | re.MULTILINE)
EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def clean_article_text(text: str) -> str:
    """
    Strip provider artifacts from generated article text.

    Removes title/label lines and disallowed punctuation, collapses runs of
    horizontal whitespace while keeping line breaks, and trims blank lines at
    both ends. Never raises; cleaning already clean text returns it unchanged.
    """
    if not text:
        return ""

    # Every line-break variant becomes \n so title removal stays on its own line
    cleaned = "\n".join(text.splitlines())
    for char, replacement in DISALLOWED_CHARACTERS.items():
        cleaned = cleaned.replace(char, replacement)

    # Collapse before matching so multi-space variants of the labels are caught
    cleaned = HORIZONTAL_WHITESPACE.sub(" ", cleaned)
    cleaned = TITLE_LINE.sub("", cleaned)
    cleaned = TITLE_SENTENCE_LINE.sub("", cleaned)

    lines = [line.strip() for line in cleaned.split("\n")]
    cleaned = EXTRA_BLANK_LINES.sub("\n\n", "\n".join(lines))

    return cleaned.strip()
