import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional

from .enrich import Fetcher, enrich
from .fetch import fetch_page_content
from .logging_utils import setup_logger
from .models import BusinessRecord, EnrichmentResult, RowStatus

logger = setup_logger(__name__)

DEFAULT_CONCURRENCY = int(os.getenv("LEAD_CONCURRENCY", "8"))

# Rows a run picks up: fresh ones, and ones claimed by a run that was stopped
RUNNABLE_STATUSES = (RowStatus.PENDING, RowStatus.PROCESSING)


def apply_result(record: BusinessRecord, result: EnrichmentResult) -> BusinessRecord:
    record.result = result
    record.status = RowStatus.FOUND if result.has_contact() else RowStatus.NOT_FOUND
    return record


def enrich_record(record: BusinessRecord, fetcher: Fetcher = fetch_page_content) -> BusinessRecord:
    """
    Enrich one row in place and set its terminal status.

    Anything enrich() did not anticipate marks the row as Error; it is
    logged but never re-raised so one bad page cannot take down a batch.
    """
    record.status = RowStatus.PROCESSING
    try:
        result = enrich(record, fetcher=fetcher)
    except Exception as e:
        logger.error(f"BATCH: row {record.id} failed: {repr(e)}", exc_info=True)
        record.status = RowStatus.ERROR
        return record
    return apply_result(record, result)


def run_batch(
    records: List[BusinessRecord],
    *,
    fetcher: Fetcher = fetch_page_content,
    concurrency: int = DEFAULT_CONCURRENCY,
    stop_event: Optional[threading.Event] = None,
    progress: Optional[Callable[[int, int], None]] = None,
    log: Optional[Callable[[str], None]] = None,
) -> Dict[str, int]:
    """
    Enrich every runnable record, one task per record.

    Setting `stop_event` stops new rows from starting; rows already being
    fetched finish normally and rows never started go back to Pending.

    Args:
        records: Rows to process (mutated in place)
        fetcher: Page fetch collaborator
        concurrency: Worker threads
        stop_event: Cooperative stop signal
        progress: Called with (done, total) after each row
        log: Extra sink for human-readable progress lines

    Returns:
        Counts: total, found, not_found, errors, skipped
    """
    todo = [r for r in records if r.status in RUNNABLE_STATUSES]
    n = len(todo)
    for r in todo:
        r.status = RowStatus.PROCESSING

    def _log(msg: str):
        logger.info(msg)
        if log:
            try:
                log(msg)
            except Exception:
                logger.debug("BATCH: log sink failed", exc_info=True)

    def _progress(done: int):
        if progress:
            try:
                progress(done, n)
            except Exception as e:
                logger.warning(f"BATCH: progress callback failed: {e}")

    def _run_one(record: BusinessRecord) -> bool:
        if stop_event is not None and stop_event.is_set():
            record.status = RowStatus.PENDING
            return False
        enrich_record(record, fetcher=fetcher)
        return True

    _log(f"BATCH: starting {n} rows (concurrency={concurrency})")
    _progress(0)

    done = 0
    skipped = 0
    if n:
        with ThreadPoolExecutor(max_workers=max(1, int(concurrency or DEFAULT_CONCURRENCY))) as ex:
            futs = {ex.submit(_run_one, r): r for r in todo}
            for fut in as_completed(futs):
                if not fut.result():
                    skipped += 1
                    continue
                done += 1
                _progress(done)
                if done % 10 == 0:
                    _log(f"BATCH: enriched {done}/{n}")

    stats = {
        "total": n,
        "found": sum(1 for r in todo if r.status == RowStatus.FOUND),
        "not_found": sum(1 for r in todo if r.status == RowStatus.NOT_FOUND),
        "errors": sum(1 for r in todo if r.status == RowStatus.ERROR),
        "skipped": skipped,
    }
    _log(f"BATCH: finished {stats}")
    return stats
