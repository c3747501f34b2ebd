import threading

from datasources.http import DEFAULT_USER_AGENT, get_shared_session


def test_shared_session_headers_and_retry():
    s = get_shared_session()
    assert s.headers["User-Agent"] == DEFAULT_USER_AGENT
    assert s.headers["Accept"] == "application/json"
    retry = s.get_adapter("https://prices.runescape.wiki").max_retries
    assert retry.total == 2
    assert 429 in retry.status_forcelist


def test_shared_session_is_per_thread():
    sessions = []
    t = threading.Thread(target=lambda: sessions.append(get_shared_session()))
    t.start()
    t.join()
    assert get_shared_session() is get_shared_session()
    assert sessions[0] is not get_shared_session()
