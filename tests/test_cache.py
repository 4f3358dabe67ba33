"""报价缓存测试。"""

from pricecompare.modules.quote.cache import QuoteCache


def test_get_and_set() -> None:
    cache = QuoteCache(max_entries=2)
    assert cache.get(("浙江", "杭州", 1.0)) is None

    cache.set(("浙江", "杭州", 1.0), ["result"])
    assert cache.get(("浙江", "杭州", 1.0)) == ["result"]
    assert ("浙江", "杭州", 1.0) in cache
    assert len(cache) == 1


def test_evicts_least_recently_used() -> None:
    cache = QuoteCache(max_entries=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)

    assert "b" not in cache
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert len(cache) == 2


def test_overwrite_refreshes_entry() -> None:
    cache = QuoteCache(max_entries=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)
    cache.set("c", 3)

    assert cache.get("a") == 10
    assert "b" not in cache


def test_zero_capacity_disables_caching() -> None:
    cache = QuoteCache(max_entries=0)
    cache.set("a", 1)
    assert cache.get("a") is None
    assert len(cache) == 0


def test_invalidate() -> None:
    cache = QuoteCache()
    for index in range(10):
        cache.set(index, index)
    cache.invalidate()
    assert len(cache) == 0
    assert cache.max_entries == 50
