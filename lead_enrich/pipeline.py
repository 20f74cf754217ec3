"""
Batch enrichment pipeline - shared by the CLI
Load rows -> enrich each website -> write enriched CSV
"""
import datetime
import uuid
from typing import Any, Dict, Optional

from .batch import DEFAULT_CONCURRENCY, run_batch
from .fetch import fetch_page_content
from .io_utils import load_records, write_output_csv
from .logging_utils import setup_logger

logger = setup_logger(__name__)


def run_pipeline(
    input_path: str,
    output_path: str,
    config: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Enrich a CSV/XLSX of businesses and write the result as CSV

    Args:
        input_path: Path to input CSV/XLSX (needs a website/Website column)
        output_path: Path to output enriched CSV
        config: Optional settings: concurrency, fetcher, progress_callback

    Returns:
        Dict with statistics about the run
    """
    config = config or {}
    run_id = f"{datetime.datetime.now(datetime.timezone.utc).isoformat()}_{uuid.uuid4().hex[:8]}"

    logger.info("=" * 60)
    logger.info("Starting Business Lead Enrichment Pipeline")
    logger.info(f"RUN_ID={run_id}")
    logger.info("=" * 60)

    logger.info("Step 1: Loading input file...")
    records = load_records(input_path)

    logger.info("Step 2: Enriching businesses...")
    stats = run_batch(
        records,
        fetcher=config.get("fetcher") or fetch_page_content,
        concurrency=int(config.get("concurrency") or DEFAULT_CONCURRENCY),
        progress=config.get("progress_callback"),
    )

    logger.info("Step 3: Writing output CSV...")
    write_output_csv(records, output_path)

    with_email = sum(1 for r in records if r.result is not None and r.result.owner_email)
    with_owner = sum(1 for r in records if r.result is not None and r.result.owner_first_name)
    with_niche = sum(1 for r in records if r.result is not None and r.result.niche)

    logger.info("=" * 60)
    logger.info("ENRICHMENT SUMMARY")
    logger.info("=" * 60)
    logger.info(f"  Rows processed: {stats['total']}")
    logger.info(f"  Found: {stats['found']}  Not found: {stats['not_found']}  Errors: {stats['errors']}")
    logger.info(f"  With owner name: {with_owner}/{len(records)}")
    logger.info(f"  With email: {with_email}/{len(records)}")
    logger.info(f"  With niche: {with_niche}/{len(records)}")
    logger.info(f"  Output file: {output_path}")
    logger.info("=" * 60)

    out = dict(stats)
    out.update({
        "run_id": run_id,
        "rows": len(records),
        "with_owner": with_owner,
        "with_email": with_email,
        "with_niche": with_niche,
    })
    return out
