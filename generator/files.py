"""Per-article folders and the job archive on local disk."""
import logging
import os
import re
import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from shared.errors import PackagingError
from shared.utils import sanitize_keyword

logger = logging.getLogger(__name__)

ARTICLE_FILENAME = "article.txt"
ARCHIVE_FILENAME = "articles.zip"
FOLDER_PATTERN = re.compile(r"^Article_(\d+)_")


@dataclass
class ArticleRecord:
    """One generated and cleaned article and its position in the job."""
    sequence_number: int
    keyword: str
    url: str
    text: str

    @property
    def folder_name(self) -> str:
        return f"Article_{self.sequence_number}_{sanitize_keyword(self.keyword)}"


class ArticleFileManager:
    """Owns the working directory of a single job."""

    def __init__(self, job_id: str, output_dir: Union[str, Path]):
        self.job_id = job_id
        self.job_dir = Path(output_dir) / job_id

    @property
    def archive_path(self) -> Path:
        return self.job_dir / ARCHIVE_FILENAME

    def prepare(self) -> Path:
        """Create the job directory."""
        try:
            self.job_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PackagingError(f"Cannot create job directory: {e}") from e
        return self.job_dir

    def save_article(self, record: ArticleRecord) -> Path:
        """Write an article to its own folder and flush it to disk."""
        folder = self.job_dir / record.folder_name
        path = folder / ARTICLE_FILENAME

        try:
            folder.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(record.text)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise PackagingError(f"Failed to save article {record.sequence_number}: {e}") from e

        logger.debug(f"Saved article {record.sequence_number} to {path}")
        return path

    def article_folders(self) -> List[Path]:
        """Article folders of this job in sequence order."""
        folders = [p for p in self.job_dir.iterdir() if p.is_dir() and FOLDER_PATTERN.match(p.name)]
        return sorted(folders, key=lambda p: int(FOLDER_PATTERN.match(p.name).group(1)))

    def create_archive(self) -> str:
        """
        Zip every article folder into articles.zip inside the job directory.

        The archive is written to a temporary name and moved into place, so
        a reader never sees a partial file. Returns the archive path.
        """
        if not self.job_dir.is_dir():
            raise PackagingError(f"Job directory not found: {self.job_dir}")

        tmp_path = self.archive_path.with_suffix(".zip.part")

        try:
            folders = self.article_folders()
            with zipfile.ZipFile(tmp_path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
                for folder in folders:
                    for file_path in sorted(folder.rglob("*")):
                        if file_path.is_file():
                            archive.write(file_path, file_path.relative_to(self.job_dir).as_posix())
            os.replace(tmp_path, self.archive_path)
        except (OSError, zipfile.BadZipFile) as e:
            tmp_path.unlink(missing_ok=True)
            raise PackagingError(f"Failed to create archive: {e}") from e

        logger.info(f"Created archive for job {self.job_id} with {len(folders)} articles")
        return str(self.archive_path)

    def remove(self):
        """Delete the job directory and everything in it."""
        shutil.rmtree(self.job_dir, ignore_errors=True)
