"""Job routes for the REST API."""
import logging
import os
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.responses import FileResponse

from api.dependencies import get_job_runner, get_job_store
from api.schemas.requests import GenerationRequest
from api.schemas.responses import JobResponse
from generator.files import ARCHIVE_FILENAME
from generator.runner import JobRunner
from shared.errors import JobNotFoundError, JobNotReadyError
from storage.job_store import JobStore, JobStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["jobs"])


@router.post("/generate", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def generate_articles(
    request: GenerationRequest,
    store: JobStore = Depends(get_job_store),
    runner: JobRunner = Depends(get_job_runner)
):
    """
    Submit a new article generation job.

    - Validates input (invalid requests never create a job)
    - Creates the job record
    - Starts the generation pipeline in the background
    - Returns the job as created
    """
    max_per_keyword = runner.settings.max_articles_per_keyword
    if request.articles_per_keyword > max_per_keyword:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Articles per keyword must be between 1 and {max_per_keyword}"
        )

    job = await store.create_job(
        total_articles=request.total_articles,
        provider=request.api_provider.value
    )

    runner.submit(job["id"], request.to_task())
    logger.info(f"Job {job['id']} submitted: {len(request.keywords)} keywords, {job['total_articles']} articles")

    return JobResponse.from_job(job)


@router.get("/job/{job_id}", response_model=JobResponse)
async def get_job_status(
    job_id: str,
    store: JobStore = Depends(get_job_store)
):
    """Get the current status of a job."""
    job = await store.get_job(job_id)

    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job {job_id} not found"
        )

    return JobResponse.from_job(job)


@router.get("/download/{job_id}")
async def download_archive(
    job_id: str,
    store: JobStore = Depends(get_job_store)
):
    """Download the zip archive of a completed job."""
    try:
        archive_path = await _resolve_archive(store, job_id)
    except JobNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except JobNotReadyError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return FileResponse(archive_path, media_type="application/zip", filename=ARCHIVE_FILENAME)


@router.get("/jobs", response_model=List[JobResponse])
async def list_jobs(
    status_filter: Optional[str] = None,
    limit: int = 50,
    skip: int = 0,
    store: JobStore = Depends(get_job_store)
):
    """List all jobs with optional status filter."""
    jobs = await store.list_jobs(status=status_filter, limit=limit, skip=skip)
    return [JobResponse.from_job(job) for job in jobs]


async def _resolve_archive(store: JobStore, job_id: str) -> str:
    """Find the archive of a job, or explain why it cannot be downloaded."""
    job = await store.get_job(job_id)
    if not job:
        raise JobNotFoundError(f"Job {job_id} not found")

    if job["status"] != JobStatus.COMPLETED or not job["archive_path"]:
        raise JobNotReadyError("Articles not ready for download")

    if not os.path.exists(job["archive_path"]):
        logger.error(f"Archive for completed job {job_id} missing at {job['archive_path']}")
        raise JobNotFoundError("ZIP file not found")

    return job["archive_path"]
