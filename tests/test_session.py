from rates import RateCache
from session import ChatSession, SessionStore


def test_throttle():
    session = ChatSession()
    assert not session.throttle("currency", 1, now=100)
    assert session.throttle("currency", 1, now=100.5)
    # пропуск тоже сдвигает время
    assert session.throttle("currency", 1, now=101.2)
    assert not session.throttle("currency", 1, now=102.5)


def test_throttle_keys_independent():
    session = ChatSession()
    assert not session.throttle("currency", 10, now=100)
    assert not session.throttle("help", 10, now=100)


def test_store_creates_once():
    store = SessionStore()
    first = store.get(1)
    assert store.get(1) is first
    assert isinstance(first.rates, RateCache)
    assert 1 in store
    assert 2 not in store


def test_sessions_do_not_share_cache():
    store = SessionStore()
    assert store.get(1).rates is not store.get(2).rates
    assert len(store) == 2
