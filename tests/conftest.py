import pytest

from models import build_registry
from rates import RateCache


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def cache():
    return RateCache()


@pytest.fixture
def fixer_response():
    return {
        "success": True,
        "timestamp": 1700000000,
        "base": "USD",
        "date": "2023-11-14",
        "rates": {"USD": 1.0, "EUR": 0.92, "RUB": 90.0},
    }
