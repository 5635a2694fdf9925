"""Exception hierarchy shared by the generator, store and API.

    ArticleGeneratorError
    +-- ProviderError      (remote text generation failed)
    +-- PackagingError     (writing article folders or the archive failed)
    +-- JobNotFoundError   (unknown job id, or archive missing on disk)
    +-- JobNotReadyError   (archive requested before the job completed)
    +-- RequestRejectedError (the API refused a client request)
"""
from typing import Optional


class ArticleGeneratorError(Exception):
    """Base exception carrying a message and the provider that raised it."""

    def __init__(self, message: str = "Article generation failed", provider_name: Optional[str] = None):
        self.message = message
        self.provider_name = provider_name
        super().__init__(message)


class ProviderError(ArticleGeneratorError):
    """Raised when a provider call fails for any reason."""


class PackagingError(ArticleGeneratorError):
    """Raised when an article or the job archive cannot be written."""


class JobNotFoundError(ArticleGeneratorError):
    """Raised when a job or its archive cannot be found."""


class JobNotReadyError(ArticleGeneratorError):
    """Raised when a download is requested for a job that is not completed."""


class RequestRejectedError(ArticleGeneratorError):
    """Raised by the client when the API answers with a client or server error."""
