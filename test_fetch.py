from unittest.mock import Mock

import requests

from lead_enrich.fetch import build_request_url, fetch_page_content


def _session(response=None, exc=None):
    s = Mock(spec=requests.Session)
    if exc is not None:
        s.get.side_effect = exc
    else:
        s.get.return_value = response
    return s


def _response(status=200, text="<html>ok</html>"):
    r = Mock()
    r.status_code = status
    r.ok = 200 <= status < 400
    r.reason = "OK" if r.ok else "Nope"
    r.text = text
    r.content = text.encode("utf-8")
    return r


def test_success_returns_body():
    s = _session(_response(text="<html>hi</html>"))
    assert fetch_page_content("https://acme.test", session=s, proxy_url="") == "<html>hi</html>"
    args, kwargs = s.get.call_args
    assert args[0] == "https://acme.test"
    assert kwargs["allow_redirects"] is True
    assert "X-Requested-With" not in kwargs["headers"]


def test_non_success_status_is_none():
    for status in (404, 500, 503):
        assert fetch_page_content("https://acme.test", session=_session(_response(status)), proxy_url="") is None


def test_network_errors_are_none():
    for exc in (requests.ConnectionError("dns"), requests.Timeout("slow"), requests.exceptions.SSLError("tls")):
        assert fetch_page_content("https://acme.test", session=_session(exc=exc), proxy_url="") is None


def test_empty_body_is_none():
    assert fetch_page_content("https://acme.test", session=_session(_response(text="")), proxy_url="") is None


def test_single_attempt():
    s = _session(exc=requests.ConnectionError("refused"))
    fetch_page_content("https://acme.test", session=s, proxy_url="")
    assert s.get.call_count == 1


def test_proxy_url_wraps_encoded_target():
    proxy = "https://api.allorigins.win/raw?url="
    assert build_request_url("https://a.test/x?y=1", proxy) == (
        "https://api.allorigins.win/raw?url=https%3A%2F%2Fa.test%2Fx%3Fy%3D1"
    )
    assert build_request_url("https://a.test", "") == "https://a.test"


def test_proxied_fetch_sends_xhr_header():
    s = _session(_response())
    fetch_page_content("https://acme.test", session=s, proxy_url="https://proxy.test/raw?url=")
    args, kwargs = s.get.call_args
    assert args[0] == "https://proxy.test/raw?url=https%3A%2F%2Facme.test"
    assert kwargs["headers"]["X-Requested-With"] == "XMLHttpRequest"
