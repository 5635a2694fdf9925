"""Response schemas for API endpoints."""
from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from storage.job_store import JobStatus


class JobResponse(BaseModel):
    """Response schema for a job record."""
    job_id: str = Field(..., description="Unique job identifier")
    status: str = Field(..., description="pending, processing, completed or failed")
    provider: Optional[str] = Field(None, description="Provider generating the articles")
    total_articles: int = Field(..., description="Total number of articles in job")
    completed_articles: int = Field(..., description="Number of articles written so far")
    error: Optional[str] = Field(None, description="Failure reason when status is failed")
    download_url: Optional[str] = Field(None, description="Archive download path when completed")
    created_at: datetime = Field(..., description="Job creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    completed_at: Optional[datetime] = Field(None, description="Terminal state timestamp")

    @classmethod
    def from_job(cls, job: Dict[str, Any]) -> "JobResponse":
        """Build a response from a store record, hiding the archive's disk path."""
        download_url = None
        if job["status"] == JobStatus.COMPLETED and job["archive_path"]:
            download_url = f"/api/download/{job['id']}"

        return cls(
            job_id=job["id"],
            status=job["status"],
            provider=job.get("provider"),
            total_articles=job["total_articles"],
            completed_articles=job["completed_articles"],
            error=job["error"],
            download_url=download_url,
            created_at=job["created_at"],
            updated_at=job["updated_at"],
            completed_at=job["completed_at"]
        )


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
