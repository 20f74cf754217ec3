"""
In-memory job table for uploaded batches (one job per uploaded file)
"""
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import BusinessRecord, ProcessingStatus

MAX_LOG_LINES = 500


@dataclass
class Job:
    id: str
    filename: str = ""
    records: List[BusinessRecord] = field(default_factory=list)
    status: ProcessingStatus = ProcessingStatus.IDLE
    created_at: float = field(default_factory=time.time)
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    progress_cur: int = 0
    progress_total: int = 0
    error: Optional[str] = None
    stats: Dict[str, int] = field(default_factory=dict)
    logs: List[str] = field(default_factory=list)
    stop_event: threading.Event = field(default_factory=threading.Event)
    # True from claim_for_run until the run's thread has returned
    worker_active: bool = False

    def to_summary(self) -> Dict[str, object]:
        return {
            "job_id": self.id,
            "filename": self.filename,
            "status": self.status.value,
            "rows": len(self.records),
            "progress": {"current": self.progress_cur, "total": self.progress_total},
            "created_at": self.created_at,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "error": self.error,
            "stats": dict(self.stats),
            "worker_active": self.worker_active,
        }


_JOBS: Dict[str, Job] = {}
_LOCK = threading.Lock()


def new_job(records: List[BusinessRecord], filename: str = "") -> Job:
    j = Job(id=uuid.uuid4().hex, filename=filename, records=list(records))
    with _LOCK:
        _JOBS[j.id] = j
    return j


def get_job(job_id: str) -> Optional[Job]:
    with _LOCK:
        return _JOBS.get(job_id)


def delete_job(job_id: str) -> bool:
    with _LOCK:
        return _JOBS.pop(job_id, None) is not None


def clear_jobs() -> None:
    with _LOCK:
        _JOBS.clear()


def set_progress(job_id: str, cur: int, total: int):
    with _LOCK:
        j = _JOBS.get(job_id)
        if not j:
            return
        j.progress_cur = int(cur or 0)
        j.progress_total = int(total or 0)


def set_status(job_id: str, status: ProcessingStatus, error: Optional[str] = None):
    with _LOCK:
        j = _JOBS.get(job_id)
        if not j:
            return
        j.status = status
        now = time.time()
        if status == ProcessingStatus.RUNNING:
            j.started_at = now
            j.finished_at = None
            j.error = None
        if status in (ProcessingStatus.COMPLETE, ProcessingStatus.STOPPED, ProcessingStatus.ERROR):
            j.finished_at = now
        if error:
            j.error = str(error)[:2000]


def claim_for_run(job_id: str) -> bool:
    """
    Move a job to RUNNING unless it already is, or a stopped run is still
    finishing its in-flight rows. Check and set happen under the lock so
    two /run calls cannot both start it.
    """
    with _LOCK:
        j = _JOBS.get(job_id)
        if not j or j.status == ProcessingStatus.RUNNING or j.worker_active:
            return False
        j.worker_active = True
        j.stop_event.clear()
        j.status = ProcessingStatus.RUNNING
        j.started_at = time.time()
        j.finished_at = None
        j.error = None
        return True


def stop_job(job_id: str) -> bool:
    """Signal a running job to stop starting new rows."""
    with _LOCK:
        j = _JOBS.get(job_id)
        if not j or j.status != ProcessingStatus.RUNNING:
            return False
        j.stop_event.set()
        j.status = ProcessingStatus.STOPPED
        j.finished_at = time.time()
        return True


def release_worker(job_id: str):
    """Mark the job's run thread as finished; /run is accepted again."""
    with _LOCK:
        j = _JOBS.get(job_id)
        if j:
            j.worker_active = False


def append_log(job_id: str, line: str):
    with _LOCK:
        j = _JOBS.get(job_id)
        if not j:
            return
        j.logs.append(line.rstrip())
        if len(j.logs) > MAX_LOG_LINES:
            del j.logs[: len(j.logs) - MAX_LOG_LINES]
