"""FastAPI dependencies resolving the objects built in the app lifespan."""
from fastapi import Request

from generator.runner import JobRunner
from storage.job_store import JobStore


def get_job_store(request: Request) -> JobStore:
    """Get the application's job store."""
    return request.app.state.job_store


def get_job_runner(request: Request) -> JobRunner:
    """Get the application's job runner."""
    return request.app.state.job_runner
