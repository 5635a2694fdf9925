"""In-memory job store shared by the API and the generation pipeline."""
import asyncio
import logging
from datetime import timedelta
from typing import Optional, List, Dict, Any

from shared.utils import generate_job_id, get_utc_now

logger = logging.getLogger(__name__)


class JobStatus:
    """Job status constants."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    TERMINAL = (COMPLETED, FAILED)


class JobStore:
    """Process-lifetime registry of job records keyed by job id.

    Records are plain dicts. Every write replaces the stored record with a
    merged copy and every read returns a copy, so callers never share a
    mutable record with the pipeline.
    """

    def __init__(self):
        self._jobs: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def create_job(self, total_articles: int, provider: Optional[str] = None) -> Dict[str, Any]:
        """Create a new job record."""
        now = get_utc_now()

        async with self._lock:
            job_id = generate_job_id()
            while job_id in self._jobs:
                job_id = generate_job_id()

            job = {
                "id": job_id,
                "status": JobStatus.PENDING,
                "provider": provider,
                "total_articles": total_articles,
                "completed_articles": 0,
                "archive_path": None,
                "error": None,
                "created_at": now,
                "updated_at": now,
                "completed_at": None
            }
            self._jobs[job_id] = job

        return dict(job)

    async def get_job(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Get a job by ID."""
        job = self._jobs.get(job_id)
        return dict(job) if job else None

    async def update_job(self, job_id: str, **fields: Any) -> bool:
        """Merge fields into a job. Unknown ids are ignored."""
        async with self._lock:
            return self._merge(job_id, fields)

    async def start_job(self, job_id: str) -> bool:
        """Move a pending job to processing."""
        async with self._lock:
            job = self._jobs.get(job_id)
            if not job or job["status"] != JobStatus.PENDING:
                return False
            return self._merge(job_id, {"status": JobStatus.PROCESSING})

    async def set_progress(self, job_id: str, completed_articles: int) -> bool:
        """Record the number of fully persisted articles.

        The counter only moves forward and never passes total_articles.
        """
        async with self._lock:
            job = self._jobs.get(job_id)
            if not job or job["status"] in JobStatus.TERMINAL:
                return False
            if completed_articles <= job["completed_articles"]:
                return False
            completed = min(completed_articles, job["total_articles"])
            return self._merge(job_id, {"completed_articles": completed})

    async def complete_job(self, job_id: str, archive_path: str) -> bool:
        """Mark a job as completed with its archive."""
        return await self._finish(job_id, {
            "status": JobStatus.COMPLETED,
            "archive_path": archive_path,
            "error": None
        })

    async def fail_job(self, job_id: str, error: str) -> bool:
        """Mark a job as failed."""
        return await self._finish(job_id, {
            "status": JobStatus.FAILED,
            "archive_path": None,
            "error": error or "Failed to generate articles"
        })

    async def list_jobs(
        self,
        status: Optional[str] = None,
        limit: int = 50,
        skip: int = 0
    ) -> List[Dict[str, Any]]:
        """List jobs with optional status filter, newest first."""
        jobs = [dict(job) for job in reversed(self._jobs.values()) if not status or job["status"] == status]
        return jobs[skip:skip + limit]

    async def purge_expired(self, max_age: timedelta) -> List[Dict[str, Any]]:
        """Remove terminal jobs that finished more than max_age ago."""
        cutoff = get_utc_now() - max_age

        async with self._lock:
            expired = [
                job for job in self._jobs.values()
                if job["status"] in JobStatus.TERMINAL
                and job["completed_at"] is not None
                and job["completed_at"] < cutoff
            ]
            for job in expired:
                del self._jobs[job["id"]]

        if expired:
            logger.info(f"Purged {len(expired)} expired jobs")
        return expired

    async def _finish(self, job_id: str, fields: Dict[str, Any]) -> bool:
        """Apply a terminal transition if the job has not already finished."""
        async with self._lock:
            job = self._jobs.get(job_id)
            if not job or job["status"] in JobStatus.TERMINAL:
                return False
            fields["completed_at"] = get_utc_now()
            return self._merge(job_id, fields)

    def _merge(self, job_id: str, fields: Dict[str, Any]) -> bool:
        job = self._jobs.get(job_id)
        if job is None:
            return False
        self._jobs[job_id] = {**job, **fields, "updated_at": get_utc_now()}
        return True

    def __len__(self) -> int:
        return len(self._jobs)
