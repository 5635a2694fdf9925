"""Work items handed to the generator."""
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class GenerationTask:
    """Everything a pipeline needs to produce the articles of one job."""
    provider: str
    entries: List[Tuple[str, str]]  # (keyword, url) in submission order
    articles_per_keyword: int
    api_key: str = field(repr=False)

    @property
    def total_articles(self) -> int:
        return len(self.entries) * self.articles_per_keyword
