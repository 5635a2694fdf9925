# Storage module
from .job_store import JobStore, JobStatus

__all__ = ["JobStore", "JobStatus"]
