"""Tests for the rate cache."""

from fundwise.models.funding import ExchangeRate
from fundwise.rates.cache import RateCache


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestRateCache:
    def test_miss(self):
        cache = RateCache(clock=FakeClock())
        assert cache.get("USD/COP") is None
        assert "USD/COP" not in cache

    def test_fresh_hit(self):
        clock = FakeClock()
        cache = RateCache(60, clock=clock)
        entry = ExchangeRate(rate=4100.0, timestamp=cache.now_ms(), source="test")
        cache.set("USD/COP", entry)

        clock.advance(59.9)
        assert cache.get("USD/COP") == entry
        assert "USD/COP" in cache
        assert len(cache) == 1

    def test_stale_at_ttl(self):
        clock = FakeClock()
        cache = RateCache(60, clock=clock)
        cache.set("USD/COP", ExchangeRate(rate=4100.0, timestamp=cache.now_ms(), source="test"))

        clock.advance(60)
        assert cache.get("USD/COP") is None

    def test_pairs_are_ordered(self):
        cache = RateCache(clock=FakeClock())
        cache.set("USD/COP", ExchangeRate(rate=4100.0, timestamp=cache.now_ms(), source="test"))
        assert cache.get("COP/USD") is None

    def test_overwrite_and_clear(self):
        cache = RateCache(clock=FakeClock())
        cache.set("USD/COP", ExchangeRate(rate=4100.0, timestamp=cache.now_ms(), source="a"))
        cache.set("USD/COP", ExchangeRate(rate=4200.0, timestamp=cache.now_ms(), source="b"))
        assert cache.get("USD/COP").rate == 4200.0

        cache.clear()
        assert len(cache) == 0

    def test_now_ms(self):
        cache = RateCache(clock=lambda: 1.5)
        assert cache.now_ms() == 1500
