"""Shared fixtures: canned pages and a fake fetcher (no network in tests)."""

import threading

import pytest

from lead_enrich import jobs

ACME_HTML = """<!doctype html>
<html>
<head>
  <title>About Acme — Roofer</title>
  <style>.hero { color: red; }</style>
</head>
<body>
  <h1>About Acme</h1>
  <p>Our company is led by Jane Doe, Founder of Acme.</p>
  <p>Contact us at <a href="mailto:info@acme.test">info@acme.test</a> or jane@acme.test</p>
  <img src="/img/logo@2x.png">
  <script>var owner = "Fake Person, CEO";</script>
</body>
</html>
"""

NOTHING_HTML = """<html><head><title>Welcome</title></head>
<body><p>we make things. call us any time.</p></body></html>
"""


class FakeFetcher:
    """url -> html map; records every URL it was asked for."""

    def __init__(self, pages=None, default=None):
        self.pages = dict(pages or {})
        self.default = default
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        return self.pages.get(url, self.default)



class GatedFetcher(FakeFetcher):
    """Every fetch blocks until release(); `started` is set by the first one."""

    def __init__(self, pages=None, default=None):
        super().__init__(pages, default)
        self.started = threading.Event()
        self.gate = threading.Event()
        self._lock = threading.Lock()

    def __call__(self, url):
        with self._lock:
            self.calls.append(url)
        self.started.set()
        self.gate.wait(timeout=10)
        return self.pages.get(url, self.default)

    def release(self):
        self.gate.set()

@pytest.fixture
def acme_html():
    return ACME_HTML


@pytest.fixture
def fake_fetcher():
    return FakeFetcher(
        pages={
            "https://acme.test": ACME_HTML,
            "https://nothing.test": NOTHING_HTML,
        }
    )


@pytest.fixture(autouse=True)
def _clean_jobs():
    jobs.clear_jobs()
    yield
    jobs.clear_jobs()


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def gated_fetcher():
    fetcher = GatedFetcher(default=ACME_HTML)
    yield fetcher
    fetcher.release()
