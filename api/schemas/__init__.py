# Schemas module
from .requests import KeywordEntry, GenerationRequest
from .responses import JobResponse, ErrorResponse

__all__ = [
    "KeywordEntry",
    "GenerationRequest",
    "JobResponse",
    "ErrorResponse"
]
