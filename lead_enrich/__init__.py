"""
Business lead enrichment

Scrapes each business's website for an owner name/title, a contact email
and a niche keyword:
- page_text / email_extract / owner_extract / niche: heuristic extractors
- enrich: single-row entry point (never raises for unreachable pages)
- batch / jobs / job_runner: concurrent runs with stop/resume
- io_utils / csv_utils: CSV/XLSX in, CSV out
"""

__version__ = "1.0.0"
