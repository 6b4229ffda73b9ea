"""Background packaging jobs

Packaging runs off the caller's thread: a submitted job is queued on a
worker pool and its progress is observable through a JobRecord. A video
directory belongs to at most one unfinished job at a time. Jobs cannot
be cancelled once started.
"""

import logging
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

import psutil

from .exceptions import CmafpackError, JobConflictError
from .ladder import DEFAULT_LADDER, LadderConfig
from .models import RenditionResult, SourceVideoInfo
from .pipeline import PackagingResult, package_video
from .encoding import Encoder

log = logging.getLogger(__name__)


class JobStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    READY = "READY"
    ERROR = "ERROR"


@dataclass
class JobRecord:
    """Observable state of one packaging job"""
    job_id: str
    source_path: Path
    video_root: Path
    status: JobStatus = JobStatus.PENDING
    error: Optional[str] = None
    hls_master: Optional[Path] = None
    dash_mpd: Optional[Path] = None
    renditions: List[RenditionResult] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.status in (JobStatus.READY, JobStatus.ERROR)


class PackagingJobRunner:
    """Runs packaging jobs on a bounded worker pool.

    Each job encodes its renditions sequentially; ``max_workers`` bounds
    how many sources are packaged at once.
    """
    def __init__(self, max_workers: int = 1, encoder: Optional[Encoder] = None,
                 ladder_config: LadderConfig = DEFAULT_LADDER):
        self.encoder = encoder
        self.ladder_config = ladder_config
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix="cmafpack-job")
        self._lock = threading.Lock()
        self._jobs: Dict[str, JobRecord] = {}
        self._futures: Dict[str, Future] = {}

    def submit(self, source_path: Path, video_root: Path,
               source: Optional[SourceVideoInfo] = None) -> JobRecord:
        """
        Queue a source for packaging and return immediately.

        Raises:
            JobConflictError: If an unfinished job already owns video_root
        """
        video_root = Path(video_root)
        with self._lock:
            for record in self._jobs.values():
                if record.video_root.resolve() == video_root.resolve() and not record.finished:
                    raise JobConflictError(
                        f"Job {record.job_id} is still writing to {video_root}",
                        module="jobs"
                    )
            record = JobRecord(job_id=uuid.uuid4().hex, source_path=Path(source_path),
                               video_root=video_root)
            self._jobs[record.job_id] = record
            self._futures[record.job_id] = self._executor.submit(self._run, record, source)
        log.info("Queued job %s for %s", record.job_id, record.source_path.name)
        return record

    def _run(self, record: JobRecord, source: Optional[SourceVideoInfo]) -> Optional[PackagingResult]:
        record.status = JobStatus.PROCESSING
        mem = psutil.virtual_memory()
        log.info("Job %s processing %s (%.0f%% memory in use)",
                 record.job_id, record.source_path.name, mem.percent)
        try:
            result = package_video(record.source_path, record.video_root, source=source,
                                   encoder=self.encoder, ladder_config=self.ladder_config)
        except CmafpackError as e:
            log.error("Job %s failed: %s", record.job_id, e)
            record.error = str(e)
            record.status = JobStatus.ERROR
            return None
        except Exception as e:
            log.exception("Job %s failed unexpectedly", record.job_id)
            record.error = str(e)
            record.status = JobStatus.ERROR
            return None

        record.renditions = list(result.renditions)
        record.hls_master = result.hls_master
        record.dash_mpd = result.dash_mpd
        record.status = JobStatus.READY
        log.info("Job %s ready", record.job_id)
        return result

    def get(self, job_id: str) -> Optional[JobRecord]:
        return self._jobs.get(job_id)

    def forget(self, job_id: str) -> Optional[JobRecord]:
        """
        Drop a finished job from the runner.

        Returns:
            Optional[JobRecord]: The dropped record, or None if the id is unknown

        Raises:
            JobConflictError: If the job has not finished yet
        """
        with self._lock:
            record = self._jobs.get(job_id)
            if record is None:
                return None
            if not record.finished:
                raise JobConflictError(f"Job {job_id} is still {record.status.value}", module="jobs")
            del self._jobs[job_id]
            del self._futures[job_id]
        return record

    def prune(self) -> int:
        """Drop every finished job and return how many were dropped"""
        with self._lock:
            finished = [job_id for job_id, record in self._jobs.items() if record.finished]
            for job_id in finished:
                del self._jobs[job_id]
                del self._futures[job_id]
        if finished:
            log.debug("Pruned %d finished jobs", len(finished))
        return len(finished)

    def wait(self, job_id: str, timeout: Optional[float] = None) -> JobRecord:
        """Block until a job finishes and return its record"""
        self._futures[job_id].result(timeout=timeout)
        return self._jobs[job_id]

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
