import threading
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

DEFAULT_USER_AGENT = "oathplate-calculator/1.0 (manual refresh)"

_session_local = threading.local()

def _new_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
    s = requests.Session()
    retry = Retry(
        total=2,
        connect=2,
        read=2,
        backoff_factor=0.3,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(pool_connections=5, pool_maxsize=10, max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    # The wiki price API blocks default library user agents.
    s.headers.update({
        "User-Agent": user_agent,
        "Accept": "application/json",
        "Accept-Encoding": "gzip, deflate",
        "Connection": "keep-alive",
    })
    return s

def get_shared_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
    s = getattr(_session_local, "session", None)
    if s is None:
        s = _new_session(user_agent)
        _session_local.session = s
    return s
