import pandas as pd

import main
from lead_enrich import pipeline


def test_cli_enriches_file(tmp_path, monkeypatch, fake_fetcher):
    monkeypatch.setattr(pipeline, "fetch_page_content", fake_fetcher)
    src = tmp_path / "leads.csv"
    src.write_text("name,website,City\nAcme,https://acme.test,Austin\nGone,https://down.test,Reno\n")
    out = tmp_path / "out.csv"

    assert main.main([str(src), "-o", str(out), "--concurrency", "2"]) == 0

    df = pd.read_csv(out, dtype=str, keep_default_na=False)
    assert list(df.columns) == [
        "name", "website", "City",
        "ownerTitle", "ownerFirstName", "ownerLastName", "ownerEmail", "niche", "uncertainty",
    ]
    assert df.loc[0, "ownerTitle"] == "Founder"
    assert df.loc[1, "uncertainty"] == "Failed to fetch website"


def test_cli_missing_input(tmp_path):
    assert main.main([str(tmp_path / "missing.csv")]) == 1


def test_cli_unreadable_input(tmp_path):
    src = tmp_path / "leads.csv"
    src.write_text("name,website\n,\n")
    assert main.main([str(src), "-o", str(tmp_path / "out.csv")]) == 1


def test_run_pipeline_stats(tmp_path, fake_fetcher):
    src = tmp_path / "leads.csv"
    src.write_text("Name,Website\nAcme,https://acme.test\nQuiet,https://nothing.test\n")
    stats = pipeline.run_pipeline(str(src), str(tmp_path / "out.csv"), {"fetcher": fake_fetcher})
    assert stats["rows"] == 2
    assert stats["found"] == 1
    assert stats["with_niche"] == 1
    assert stats["with_email"] == 1
