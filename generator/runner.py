"""Background execution of generation pipelines."""
import asyncio
import logging
from datetime import timedelta
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from generator.files import ArticleFileManager
from generator.pipeline import GenerationPipeline
from generator.providers import ArticleProvider, get_provider
from generator.tasks import GenerationTask
from shared.config import Settings, settings as default_settings
from storage.job_store import JobStore

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str, Settings], ArticleProvider]


class JobRunner:
    """Runs one pipeline task per job and keeps track of it until it ends."""

    def __init__(
        self,
        store: JobStore,
        settings: Optional[Settings] = None,
        provider_factory: ProviderFactory = get_provider
    ):
        self.store = store
        self.settings = settings or default_settings
        self.provider_factory = provider_factory
        self._tasks: Dict[str, asyncio.Task] = {}

    @property
    def output_dir(self) -> Union[str, Path]:
        return self.settings.output_dir

    def submit(self, job_id: str, task: GenerationTask) -> asyncio.Task:
        """Start the pipeline for a job in the background."""
        running = asyncio.create_task(self._run(job_id, task), name=f"generate-{job_id}")
        self._tasks[job_id] = running
        running.add_done_callback(lambda _: self._tasks.pop(job_id, None))
        return running

    async def _run(self, job_id: str, task: GenerationTask):
        try:
            provider = self.provider_factory(task.provider, self.settings)
            pipeline = GenerationPipeline(self.store, provider, self.output_dir)
        except Exception as e:
            logger.exception(f"Could not start job {job_id}")
            await self.store.fail_job(job_id, f"Failed to start generation: {e}")
            return

        await pipeline.run(job_id, task)

    def running_jobs(self) -> List[str]:
        """IDs of jobs whose pipeline has not finished."""
        return [job_id for job_id, task in self._tasks.items() if not task.done()]

    async def wait(self, job_id: str):
        """Wait for a job's pipeline to finish, if it is still running."""
        task = self._tasks.get(job_id)
        if task:
            await asyncio.gather(task, return_exceptions=True)

    async def shutdown(self):
        """Cancel every running pipeline and wait for them to record the failure."""
        tasks = list(self._tasks.values())
        if not tasks:
            return

        logger.info(f"Cancelling {len(tasks)} running jobs")
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def purge_expired(self) -> int:
        """Drop finished jobs past the retention window along with their files."""
        if self.settings.job_retention_seconds <= 0:
            return 0

        expired = await self.store.purge_expired(timedelta(seconds=self.settings.job_retention_seconds))
        for job in expired:
            await asyncio.to_thread(ArticleFileManager(job["id"], self.output_dir).remove)
        return len(expired)

    async def run_retention(self):
        """Periodically purge expired jobs until cancelled."""
        while True:
            await asyncio.sleep(self.settings.retention_sweep_interval)
            await self.purge_expired()
