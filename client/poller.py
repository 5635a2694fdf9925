"""Client that submits generation jobs and follows them to the end."""
import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Literal, Optional, Union

import httpx
from pydantic import BaseModel, Field

from shared.config import settings
from shared.errors import (
    ArticleGeneratorError,
    JobNotFoundError,
    JobNotReadyError,
    RequestRejectedError
)
from shared.utils import generate_log_id

logger = logging.getLogger(__name__)

class LogEntry(BaseModel):
    """One line of the client's status log."""
    id: str = Field(default_factory=generate_log_id)
    timestamp: str = Field(default_factory=lambda: datetime.now().strftime("%H:%M:%S"))
    message: str
    type: Literal["info", "success", "error", "progress"] = "info"


class JobPoller:
    """
    Talks to the generation API over HTTP.

    Status is polled at a fixed interval while a job runs. Polling stops as
    soon as the job reaches a terminal state, a status request fails, or
    the caller stops consuming the log stream.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        poll_interval: Optional[float] = None
    ):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url or settings.api_base_url, timeout=30.0)
        self.poll_interval = settings.poll_interval if poll_interval is None else poll_interval
        self.last_job: Optional[Dict[str, Any]] = None

    async def __aenter__(self) -> "JobPoller":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def close(self):
        """Close the HTTP client if this poller created it."""
        if self._owns_client:
            await self.client.aclose()

    async def submit(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Submit a generation request and return the created job."""
        response = await self.client.post("/api/generate", json=payload)
        if response.status_code >= 400:
            raise RequestRejectedError(self._detail(response))
        job = response.json()
        self.last_job = job
        return job

    async def get_status(self, job_id: str) -> Dict[str, Any]:
        """Fetch the current job record."""
        response = await self.client.get(f"/api/job/{job_id}")
        if response.status_code == 404:
            raise JobNotFoundError(self._detail(response))
        if response.status_code >= 400:
            raise RequestRejectedError(self._detail(response))
        job = response.json()
        self.last_job = job
        return job

    async def download(self, job_id: str, dest: Union[str, Path]) -> Path:
        """Stream the job archive to a local file."""
        dest = Path(dest)
        async with self.client.stream("GET", f"/api/download/{job_id}") as response:
            if response.status_code >= 400:
                await response.aread()
                if response.status_code == 404:
                    raise JobNotFoundError(self._detail(response))
                if response.status_code == 400:
                    raise JobNotReadyError(self._detail(response))
                raise RequestRejectedError(self._detail(response))

            dest.parent.mkdir(parents=True, exist_ok=True)
            partial = dest.with_name(dest.name + ".part")
            try:
                with open(partial, "wb") as f:
                    async for chunk in response.aiter_bytes():
                        f.write(chunk)
                partial.replace(dest)
            finally:
                partial.unlink(missing_ok=True)

        logger.info(f"Saved archive of job {job_id} to {dest}")
        return dest

    async def watch(self, job_id: str) -> AsyncIterator[LogEntry]:
        """Poll a job and yield log entries until it reaches a terminal state."""
        last_completed = 0

        while True:
            await asyncio.sleep(self.poll_interval)

            try:
                job = await self.get_status(job_id)
            except (httpx.HTTPError, ArticleGeneratorError) as e:
                logger.warning(f"Status check for job {job_id} failed: {e}")
                yield LogEntry(message="✗ Error checking status", type="error")
                return

            if job["status"] == "completed":
                yield LogEntry(
                    message=f"✓ All {job['total_articles']} articles generated successfully!",
                    type="success"
                )
                yield LogEntry(message="✓ ZIP file created", type="success")
                return

            if job["status"] == "failed":
                yield LogEntry(message=f"✗ Generation failed: {job['error']}", type="error")
                return

            if job["status"] == "processing" and job["completed_articles"] > last_completed:
                last_completed = job["completed_articles"]
                yield LogEntry(
                    message=f"⋯ Generated article {last_completed} of {job['total_articles']}",
                    type="progress"
                )

    async def run(
        self,
        payload: Dict[str, Any],
        dest: Optional[Union[str, Path]] = None
    ) -> AsyncIterator[LogEntry]:
        """Submit a job, follow it, and download the archive when it completes."""
        yield LogEntry(message="⋯ Initializing article generation...")

        try:
            job = await self.submit(payload)
        except (httpx.HTTPError, RequestRejectedError) as e:
            yield LogEntry(message=f"Error: {str(e) or 'Failed to start generation'}", type="error")
            return

        yield LogEntry(message=f"Starting generation of {job['total_articles']} articles...")

        async for entry in self.watch(job["job_id"]):
            yield entry

        if dest is None or not self.last_job or self.last_job["status"] != "completed":
            return

        try:
            path = await self.download(job["job_id"], dest)
        except (httpx.HTTPError, ArticleGeneratorError) as e:
            yield LogEntry(message=f"✗ Download failed: {e}", type="error")
            return

        yield LogEntry(message=f"✓ Archive saved to {path}", type="success")

    @staticmethod
    def _detail(response: httpx.Response) -> str:
        """Error message from an API error response."""
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"

        if not isinstance(body, dict):
            return str(body)

        detail = body.get("detail")
        if isinstance(detail, list):
            # pydantic validation errors
            return "; ".join(err.get("msg", str(err)) for err in detail)
        return str(detail or body.get("error") or f"HTTP {response.status_code}")
