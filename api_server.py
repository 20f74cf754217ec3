"""
FastAPI server for business lead enrichment
Upload a CSV/XLSX, run/stop the enrichment, poll rows, download the CSV
"""

import os
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from lead_enrich import __version__
from lead_enrich import jobs
from lead_enrich.batch import DEFAULT_CONCURRENCY, enrich_record, run_batch
from lead_enrich.csv_utils import records_to_csv_bytes
from lead_enrich.enrich import Fetcher
from lead_enrich.fetch import fetch_page_content
from lead_enrich.io_utils import IngestError, display_headers, parse_records
from lead_enrich.job_runner import start_background_job
from lead_enrich.logging_utils import setup_logger
from lead_enrich.models import BusinessRecord, ProcessingStatus

# Load environment variables
load_dotenv()

logger = setup_logger(__name__)

# Bigger uploads have to go through /jobs
MAX_SYNC_ROWS = int(os.getenv("MAX_SYNC_ROWS", "25"))
MAX_CONCURRENCY = int(os.getenv("LEAD_MAX_CONCURRENCY", "32"))

CSV_HEADERS = {
    "Cache-Control": "no-store",
    "X-Content-Type-Options": "nosniff",
}

app = FastAPI(
    title="Business Lead Finder API",
    description="Scrape business websites for owner name, contact email and niche",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "Content-Type"],
)


def get_fetcher() -> Fetcher:
    """Page fetcher used by every endpoint (overridden in tests)."""
    return fetch_page_content


class EnrichRowReq(BaseModel):
    row: Dict[str, Any] = Field(..., description="Business row; needs a website or Website field")


def _csv_response(content: bytes, filename: str) -> Response:
    headers = dict(CSV_HEADERS)
    headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return Response(content=content, media_type="text/csv", headers=headers)


async def _read_upload(file: UploadFile) -> list:
    content = await file.read()
    try:
        return parse_records(content, file.filename or "")
    except IngestError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _require_job(job_id: str) -> jobs.Job:
    job = jobs.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail=f"job not found: {job_id}")
    return job


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "service": "Business Lead Finder API",
        "version": __version__,
        "endpoints": {
            "health": "/health",
            "enrich_row": "/enrich/row (POST) - enrich one JSON row",
            "enrich": f"/enrich (POST) - sync enrichment, up to {MAX_SYNC_ROWS} rows",
            "jobs": "/jobs (POST) - upload a file, returns job_id",
            "job_run": "/jobs/{job_id}/run (POST) - start or resume",
            "job_stop": "/jobs/{job_id}/stop (POST) - stop",
            "job_status": "/jobs/{job_id} (GET) - status and rows",
            "job_download": "/jobs/{job_id}/download (GET) - enriched CSV",
        },
        "docs": "/docs",
    }


@app.post("/enrich/row")
def enrich_row(body: EnrichRowReq, fetcher: Fetcher = Depends(get_fetcher)):
    """Enrich a single row; returns the row with status and enrichment columns."""
    record = BusinessRecord(id=0, fields=dict(body.row))
    enrich_record(record, fetcher=fetcher)
    return record.to_dict()


@app.post("/enrich")
async def enrich_file(
    file: UploadFile = File(..., description="CSV or XLSX with a website column"),
    concurrency: int = Query(DEFAULT_CONCURRENCY, ge=1),
    fetcher: Fetcher = Depends(get_fetcher),
):
    """Enrich a small file in the request and return the enriched CSV."""
    records = await _read_upload(file)
    logger.info(f"Received sync enrichment for {file.filename} ({len(records)} rows, MAX_SYNC_ROWS={MAX_SYNC_ROWS})")

    if len(records) > MAX_SYNC_ROWS:
        raise HTTPException(
            status_code=413,
            detail=f"{len(records)} rows is more than {MAX_SYNC_ROWS}; upload to /jobs instead",
        )

    stats = await run_in_threadpool(
        run_batch, records, fetcher=fetcher, concurrency=min(concurrency, MAX_CONCURRENCY)
    )
    logger.info(f"Sync enrichment complete: {stats}")
    return _csv_response(records_to_csv_bytes(records), "enriched_business_leads.csv")


@app.post("/jobs")
async def create_job(file: UploadFile = File(..., description="CSV or XLSX with a website column")):
    """Parse an upload into a job. Rows start as Pending; nothing runs until /run."""
    records = await _read_upload(file)
    job = jobs.new_job(records, filename=file.filename or "")
    logger.info(f"Created job {job.id} for file {file.filename} (rows={len(records)})")
    return JSONResponse({
        "job_id": job.id,
        "status": job.status.value,
        "rows": len(records),
        "headers": display_headers(records),
    })


@app.post("/jobs/{job_id}/run")
def run_job(
    job_id: str,
    concurrency: int = Query(DEFAULT_CONCURRENCY, ge=1),
    fetcher: Fetcher = Depends(get_fetcher),
):
    """Start the job, or resume the rows a stopped run never reached."""
    job = _require_job(job_id)
    if not jobs.claim_for_run(job_id):
        if job.status == ProcessingStatus.RUNNING:
            raise HTTPException(status_code=409, detail="job is already running")
        raise HTTPException(status_code=409, detail="job is still stopping; rows in flight have not finished")

    start_background_job(job, fetcher=fetcher, concurrency=min(concurrency, MAX_CONCURRENCY))
    logger.info(f"Job {job_id} running (concurrency={concurrency})")
    return {"job_id": job_id, "status": ProcessingStatus.RUNNING.value}


@app.post("/jobs/{job_id}/stop")
def stop_job(job_id: str):
    job = _require_job(job_id)
    if not jobs.stop_job(job_id):
        raise HTTPException(status_code=409, detail=f"job is not running (status={job.status.value})")
    logger.info(f"Job {job_id} stop requested")
    return {"job_id": job_id, "status": ProcessingStatus.STOPPED.value}


@app.get("/jobs/{job_id}")
def job_status(job_id: str, include_rows: bool = Query(True), log_lines: Optional[int] = Query(50, ge=0)):
    """Run status, progress and (by default) every row with its status."""
    job = _require_job(job_id)
    out = job.to_summary()
    out["headers"] = display_headers(job.records)
    if include_rows:
        out["rows_data"] = [r.to_dict() for r in job.records]
    if log_lines:
        out["log"] = job.logs[-log_lines:]
    return JSONResponse(out)


@app.get("/jobs/{job_id}/download")
def job_download(job_id: str):
    """Enriched CSV for the job. Not available while rows are still being processed."""
    job = _require_job(job_id)
    if job.status == ProcessingStatus.RUNNING or job.worker_active:
        logger.warning(f"Download attempt for job {job_id} while running")
        return JSONResponse(
            {"error": "not_ready", "job_id": job_id, "status": job.status.value, "worker_active": job.worker_active},
            status_code=409,
        )
    logger.info(f"Serving CSV download for job {job_id}")
    return _csv_response(records_to_csv_bytes(job.records), f"enriched-{job_id}.csv")


if __name__ == "__main__":
    import uvicorn

    # For production, use: uvicorn api_server:app --host 0.0.0.0 --port 8000
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
