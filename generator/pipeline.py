"""Sequential generation pipeline for a single job."""
import asyncio
import logging
from pathlib import Path
from typing import Union

from generator.cleaner import clean_article_text
from generator.files import ArticleFileManager, ArticleRecord
from generator.providers import ArticleProvider
from generator.tasks import GenerationTask
from shared.errors import PackagingError, ProviderError
from storage.job_store import JobStore

logger = logging.getLogger(__name__)


class GenerationPipeline:
    """
    Drives one job from pending to completed or failed.

    Articles are generated strictly one at a time in request order. The
    job's completed_articles counter is only advanced after an article has
    been written to disk, and the archive is only built once every article
    exists. Every failure is turned into a failed job; run() never raises
    except on task cancellation.
    """

    def __init__(
        self,
        store: JobStore,
        provider: ArticleProvider,
        output_dir: Union[str, Path]
    ):
        self.store = store
        self.provider = provider
        self.output_dir = output_dir

    async def run(self, job_id: str, task: GenerationTask) -> None:
        """Generate, persist and package every article of a job."""
        files = ArticleFileManager(job_id, self.output_dir)

        try:
            await self.store.start_job(job_id)
            logger.info(f"Job {job_id} processing {task.total_articles} articles with {self.provider.label}")

            files.prepare()
            await self._generate_articles(job_id, task, files)

            archive_path = await asyncio.to_thread(files.create_archive)
            await self.store.complete_job(job_id, archive_path)
            logger.info(f"Job {job_id} completed")

        except ProviderError as e:
            await self._handle_failure(job_id, e.message)
        except PackagingError as e:
            await self._handle_failure(job_id, e.message)
        except asyncio.CancelledError:
            await self._handle_failure(job_id, "Generation interrupted")
            raise
        except Exception as e:
            logger.exception(f"Unexpected error in job {job_id}")
            await self._handle_failure(job_id, f"Failed to generate articles: {e}")

    async def _generate_articles(
        self,
        job_id: str,
        task: GenerationTask,
        files: ArticleFileManager
    ):
        api_key = task.api_key
        article_number = 0

        for keyword, url in task.entries:
            for _ in range(task.articles_per_keyword):
                article_number += 1

                raw_text = await self.provider.generate(keyword, url, api_key)

                files.save_article(ArticleRecord(
                    sequence_number=article_number,
                    keyword=keyword,
                    url=url,
                    text=clean_article_text(raw_text)
                ))

                await self.store.set_progress(job_id, article_number)
                logger.info(f"Job {job_id}: article {article_number}/{task.total_articles} written")

    async def _handle_failure(self, job_id: str, error: str):
        """Record a failure; already-written articles stay on disk unexposed."""
        await self.store.fail_job(job_id, error)
        logger.error(f"Job {job_id} failed: {error}")
