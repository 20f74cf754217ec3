import threading
import traceback

from .batch import DEFAULT_CONCURRENCY, run_batch
from .enrich import Fetcher
from .fetch import fetch_page_content
from .jobs import Job, append_log, release_worker, set_progress, set_status
from .logging_utils import setup_logger
from .models import ProcessingStatus

logger = setup_logger(__name__)


def run_job(job: Job, fetcher: Fetcher = fetch_page_content, concurrency: int = DEFAULT_CONCURRENCY):
    """
    Run a claimed job to the end in the current thread.

    The job must already be claimed (jobs.claim_for_run). It finishes as
    COMPLETE, or stays STOPPED if stop_job() was called meanwhile. The
    claim is released only after run_batch has returned, so a resume
    never overlaps rows this run still has in flight.
    """
    try:
        append_log(job.id, f"JOB: started ({len(job.records)} rows)")

        def log_cb(line: str):
            append_log(job.id, line)

        def progress_cb(cur: int, total: int):
            set_progress(job.id, cur, total)

        job.stats = run_batch(
            job.records,
            fetcher=fetcher,
            concurrency=concurrency,
            stop_event=job.stop_event,
            progress=progress_cb,
            log=log_cb,
        )

        if job.stop_event.is_set():
            append_log(job.id, f"JOB: stopped | stats={job.stats}")
            set_status(job.id, ProcessingStatus.STOPPED)
        else:
            append_log(job.id, f"JOB: done | stats={job.stats}")
            set_status(job.id, ProcessingStatus.COMPLETE)

    except Exception as e:
        tb = traceback.format_exc()
        append_log(job.id, "JOB: failed")
        append_log(job.id, tb)
        logger.exception(f"Job {job.id} failed")
        set_status(job.id, ProcessingStatus.ERROR, error=str(e))

    finally:
        release_worker(job.id)


def start_background_job(
    job: Job,
    fetcher: Fetcher = fetch_page_content,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> threading.Thread:
    t = threading.Thread(target=run_job, args=(job, fetcher, concurrency), daemon=True)
    try:
        t.start()
    except RuntimeError:
        release_worker(job.id)
        raise
    return t
