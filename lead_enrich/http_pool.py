import os
import threading as _th

import requests as _rq
from requests.adapters import HTTPAdapter as _HTTPAdapter
from urllib3.util.retry import Retry as _Retry

POOL_SIZE = int(os.getenv("LEAD_HTTP_POOL_SIZE", "64"))

_SESSION = None
_SESSION_LOCK = _th.Lock()


def get_session() -> _rq.Session:
    """Process-wide session shared by all fetch threads; one attempt per request."""
    global _SESSION
    if _SESSION is not None:
        return _SESSION
    with _SESSION_LOCK:
        if _SESSION is not None:
            return _SESSION
        s = _rq.Session()
        no_retry = _Retry(total=0, raise_on_status=False)
        adapter = _HTTPAdapter(pool_connections=POOL_SIZE, pool_maxsize=POOL_SIZE, max_retries=no_retry)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        _SESSION = s
        return _SESSION


def reset_session() -> None:
    global _SESSION
    with _SESSION_LOCK:
        if _SESSION is not None:
            _SESSION.close()
        _SESSION = None
