"""Job store tests."""
from datetime import timedelta

import pytest

from shared.utils import get_utc_now
from storage.job_store import JobStatus, JobStore


class TestJobStore:
    """Tests for JobStore class."""

    @pytest.mark.asyncio
    async def test_create_job_initial_state(self, store):
        """Test a new job starts pending with nothing produced."""
        job = await store.create_job(total_articles=4, provider="groq")

        assert job["id"].startswith("job_")
        assert job["status"] == JobStatus.PENDING
        assert job["total_articles"] == 4
        assert job["completed_articles"] == 0
        assert job["archive_path"] is None
        assert job["error"] is None
        assert job["provider"] == "groq"

    @pytest.mark.asyncio
    async def test_create_job_unique_ids(self, store):
        """Test job ids never collide."""
        ids = {(await store.create_job(1))["id"] for _ in range(200)}
        assert len(ids) == 200
        assert len(store) == 200

    @pytest.mark.asyncio
    async def test_get_unknown_job(self, store):
        """Test unknown ids are absent, not an error."""
        assert await store.get_job("job_missing") is None

    @pytest.mark.asyncio
    async def test_update_unknown_job_is_noop(self, store):
        """Test updating an unknown id is silently ignored."""
        assert await store.update_job("job_missing", status=JobStatus.FAILED) is False
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, store):
        """Test update merges into the existing record."""
        job = await store.create_job(3)

        assert await store.update_job(job["id"], provider="gemini")
        updated = await store.get_job(job["id"])

        assert updated["provider"] == "gemini"
        assert updated["total_articles"] == 3
        assert updated["updated_at"] >= job["updated_at"]

    @pytest.mark.asyncio
    async def test_reads_return_copies(self, store):
        """Test callers cannot mutate stored records."""
        job = await store.create_job(2)
        job["status"] = JobStatus.COMPLETED

        fetched = await store.get_job(job["id"])
        fetched["completed_articles"] = 99

        stored = await store.get_job(job["id"])
        assert stored["status"] == JobStatus.PENDING
        assert stored["completed_articles"] == 0

    @pytest.mark.asyncio
    async def test_start_job_only_from_pending(self, store):
        """Test start moves pending to processing once."""
        job = await store.create_job(1)

        assert await store.start_job(job["id"])
        assert (await store.get_job(job["id"]))["status"] == JobStatus.PROCESSING
        assert not await store.start_job(job["id"])

    @pytest.mark.asyncio
    async def test_set_progress_is_monotonic_and_bounded(self, store):
        """Test completed_articles never decreases or passes the total."""
        job = await store.create_job(3)
        await store.start_job(job["id"])

        assert await store.set_progress(job["id"], 2)
        assert not await store.set_progress(job["id"], 1)
        assert (await store.get_job(job["id"]))["completed_articles"] == 2

        await store.set_progress(job["id"], 10)
        assert (await store.get_job(job["id"]))["completed_articles"] == 3

    @pytest.mark.asyncio
    async def test_complete_job(self, store):
        """Test completion sets the archive and no error."""
        job = await store.create_job(1)
        await store.start_job(job["id"])

        assert await store.complete_job(job["id"], "/tmp/articles.zip")
        done = await store.get_job(job["id"])

        assert done["status"] == JobStatus.COMPLETED
        assert done["archive_path"] == "/tmp/articles.zip"
        assert done["error"] is None
        assert done["completed_at"] is not None

    @pytest.mark.asyncio
    async def test_fail_job(self, store):
        """Test failure sets the reason and no archive."""
        job = await store.create_job(1)
        await store.start_job(job["id"])

        assert await store.fail_job(job["id"], "Groq API error: HTTP Error 500")
        failed = await store.get_job(job["id"])

        assert failed["status"] == JobStatus.FAILED
        assert failed["error"] == "Groq API error: HTTP Error 500"
        assert failed["archive_path"] is None

    @pytest.mark.asyncio
    async def test_terminal_state_is_final(self, store):
        """Test a finished job never transitions again."""
        job = await store.create_job(2)
        await store.start_job(job["id"])
        await store.set_progress(job["id"], 1)
        await store.fail_job(job["id"], "boom")

        assert not await store.complete_job(job["id"], "/tmp/articles.zip")
        assert not await store.fail_job(job["id"], "again")
        assert not await store.set_progress(job["id"], 2)

        job = await store.get_job(job["id"])
        assert job["status"] == JobStatus.FAILED
        assert job["error"] == "boom"
        assert job["completed_articles"] == 1

    @pytest.mark.asyncio
    async def test_list_jobs_with_filter(self, store):
        """Test listing jobs newest first with a status filter."""
        first = await store.create_job(1)
        second = await store.create_job(1)
        await store.start_job(second["id"])

        all_jobs = await store.list_jobs()
        processing = await store.list_jobs(status=JobStatus.PROCESSING)

        assert [job["id"] for job in all_jobs] == [second["id"], first["id"]]
        assert [job["id"] for job in processing] == [second["id"]]
        assert await store.list_jobs(limit=1, skip=1) == [await store.get_job(first["id"])]

    @pytest.mark.asyncio
    async def test_purge_expired_removes_old_terminal_jobs(self, store):
        """Test retention only drops finished jobs past the window."""
        old = await store.create_job(1)
        await store.complete_job(old["id"], "/tmp/old.zip")
        await store.update_job(old["id"], completed_at=get_utc_now() - timedelta(hours=2))

        recent = await store.create_job(1)
        await store.fail_job(recent["id"], "boom")
        running = await store.create_job(1)

        expired = await store.purge_expired(timedelta(hours=1))

        assert [job["id"] for job in expired] == [old["id"]]
        assert await store.get_job(old["id"]) is None
        assert await store.get_job(recent["id"]) is not None
        assert await store.get_job(running["id"]) is not None

    def test_store_instances_are_independent(self):
        """Test stores do not share state."""
        assert JobStore()._jobs is not JobStore()._jobs
