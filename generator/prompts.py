"""Prompt text sent to the text-generation providers."""

ARTICLE_PROMPT = (
    'Write {min_words} to {max_words} words article on these keywords "{keyword}". '
    'I am creating this article for link building, this is the website url for helping "{url}". '
    "Also give me the title of the article, do not use headings, do not use bullet points, "
    "do not mention or add website URL, do not use curved apostrophes, "
    "article and keywords must be in english."
)


def build_article_prompt(keyword: str, url: str, min_words: int = 900, max_words: int = 1000) -> str:
    """Build the link-building article prompt for one keyword/URL pair."""
    return ARTICLE_PROMPT.format(
        min_words=min_words,
        max_words=max_words,
        keyword=keyword,
        url=url
    )
