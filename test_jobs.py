from collections import Counter

from lead_enrich import job_runner, jobs
from lead_enrich.job_runner import run_job, start_background_job
from lead_enrich.models import BusinessRecord, ProcessingStatus, RowStatus


def _job(n=3):
    records = [BusinessRecord(id=i, fields={"website": f"https://s{i}.test"}) for i in range(n)]
    return jobs.new_job(records, filename="leads.csv")


def test_claim_twice_is_rejected():
    job = _job()
    assert jobs.claim_for_run(job.id)
    assert job.status == ProcessingStatus.RUNNING
    assert job.worker_active
    assert not jobs.claim_for_run(job.id)


def test_stop_only_applies_to_running_jobs():
    job = _job()
    assert not jobs.stop_job(job.id)
    assert not jobs.stop_job("missing")
    assert job.status == ProcessingStatus.IDLE


def test_run_stopped_before_any_row_started(make_fetcher):
    fetcher = make_fetcher()
    job = _job()
    assert jobs.claim_for_run(job.id)
    assert jobs.stop_job(job.id)

    run_job(job, fetcher=fetcher)

    assert job.status == ProcessingStatus.STOPPED
    assert not job.worker_active
    assert fetcher.calls == []
    assert [r.status for r in job.records] == [RowStatus.PENDING] * 3
    assert job.stats["skipped"] == 3
    assert any("JOB: stopped" in line for line in job.logs)


def test_resume_waits_for_stopped_run_to_finish(gated_fetcher):
    job = _job()
    assert jobs.claim_for_run(job.id)
    first = start_background_job(job, fetcher=gated_fetcher, concurrency=1)
    assert gated_fetcher.started.wait(5)

    assert jobs.stop_job(job.id)
    assert job.status == ProcessingStatus.STOPPED
    # the first row is still being fetched
    assert not jobs.claim_for_run(job.id)

    gated_fetcher.release()
    first.join(5)
    assert not first.is_alive()
    assert not job.worker_active
    assert job.status == ProcessingStatus.STOPPED
    assert [r.status for r in job.records] == [RowStatus.FOUND, RowStatus.PENDING, RowStatus.PENDING]

    assert jobs.claim_for_run(job.id)
    second = start_background_job(job, fetcher=gated_fetcher, concurrency=1)
    second.join(5)
    assert not second.is_alive()

    assert job.status == ProcessingStatus.COMPLETE
    assert [r.status for r in job.records] == [RowStatus.FOUND] * 3
    assert Counter(gated_fetcher.calls) == {f"https://s{i}.test": 1 for i in range(3)}


def test_crashed_run_releases_the_job(monkeypatch, make_fetcher):
    def boom(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(job_runner, "run_batch", boom)
    job = _job()
    assert jobs.claim_for_run(job.id)
    run_job(job, fetcher=make_fetcher())

    assert job.status == ProcessingStatus.ERROR
    assert job.error == "disk on fire"
    assert not job.worker_active
    assert jobs.claim_for_run(job.id)
