from models import RateTable
from rates import STALE_AFTER, rate_table_from_response

NOW = 1_700_000_000.0


def test_initial_state(cache):
    assert cache.current() == RateTable(is_stable=False, last_update=0, data={})
    assert cache.is_stale_at(NOW)


def test_fresh_after_refresh(cache, fixer_response):
    cache.refresh(rate_table_from_response(fixer_response, NOW))
    assert not cache.is_stale_at(NOW)
    assert not cache.is_stale_at(NOW + STALE_AFTER - 1)
    assert cache.is_stale_at(NOW + STALE_AFTER)
    assert cache.is_stale_at(NOW + STALE_AFTER + 1)


def test_custom_threshold(cache, fixer_response):
    cache.refresh(rate_table_from_response(fixer_response, NOW))
    assert cache.is_stale_at(NOW + 60, threshold=60)
    assert not cache.is_stale_at(NOW + 59, threshold=60)


def test_refresh_replaces_table(cache, fixer_response):
    cache.refresh(rate_table_from_response(fixer_response, NOW))
    fixer_response["rates"] = {"TRY": 32.0}
    cache.refresh(rate_table_from_response(fixer_response, NOW + 1))
    assert cache.current().data == {"TRY": 32.0}


def test_successful_response(fixer_response):
    table = rate_table_from_response(fixer_response, NOW)
    assert table.is_stable
    assert table.last_update == NOW
    assert table.data == {"USD": 1.0, "EUR": 0.92, "RUB": 90.0}


def test_failed_responses():
    for response in (None, {}, {"success": False, "rates": {"USD": 1.0}}, {"success": True, "rates": None}):
        assert rate_table_from_response(response, NOW) == RateTable(is_stable=False, last_update=NOW, data={})


def test_non_numeric_rates_dropped():
    table = rate_table_from_response({"success": True, "rates": {"USD": 1, "EUR": "0.9", "RUB": None}}, NOW)
    assert table.data == {"USD": 1.0}


def test_failed_refresh_advances_last_update(cache):
    cache.refresh(rate_table_from_response(None, NOW))
    assert not cache.current().is_stable
    assert not cache.is_stale_at(NOW + 10)
    assert cache.is_stale_at(NOW + STALE_AFTER)
