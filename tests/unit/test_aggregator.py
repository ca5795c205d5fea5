import asyncio

import pytest

from src.contracts.discovery_v1 import BackendDescriptor, RawSearchHit
from src.discovery.errors import BackendFailure, ConfigurationMissing
from src.discovery.presenter import present_search
from src.discovery.search import MultiSourceSearchAggregator, SearchTransport

BACKENDS = (
    BackendDescriptor(name="Alpha", domain="alpha.example", icon="A"),
    BackendDescriptor(name="Beta", domain="beta.example", icon="B"),
    BackendDescriptor(name="Gamma", domain="gamma.example", icon="G"),
)


class FakeTransport(SearchTransport):
    def __init__(self, hits_by_domain: dict[str, list[RawSearchHit]] | None = None):
        self.hits_by_domain = hits_by_domain or {}
        self.failing: dict[str, Exception] = {}
        self.queries: list[str] = []

    async def query(self, backend_query: str, locale: str, result_count: int) -> list[RawSearchHit]:
        self.queries.append(backend_query)
        domain = backend_query.rsplit("site:", 1)[-1]
        if domain in self.failing:
            raise self.failing[domain]
        return list(self.hits_by_domain.get(domain, []))[:result_count]


def _hits(prefix: str, n: int) -> list[RawSearchHit]:
    return [
        RawSearchHit(title=f"{prefix} {i}", snippet=f"snippet {i}", link=f"https://{prefix}.example/{i}")
        for i in range(n)
    ]


@pytest.mark.asyncio
async def test_one_failing_backend_does_not_affect_others():
    transport = FakeTransport({"alpha.example": _hits("alpha", 2), "gamma.example": _hits("gamma", 3)})
    transport.failing["beta.example"] = BackendFailure("Beta", "HTTP 503")
    aggregator = MultiSourceSearchAggregator(transport, BACKENDS, locale="ru-RU", result_count=10)

    response = await aggregator.search("python developer")

    assert response.total == 5
    assert [i.source_name for i in response.items] == ["Alpha"] * 2 + ["Gamma"] * 3
    assert response.per_backend_counts == {"Alpha": 2, "Beta": 0, "Gamma": 3}
    assert response.failed_backends == ["Beta"]
    assert len(response.errors) == 1
    assert response.errors[0].startswith("Beta:")


@pytest.mark.asyncio
async def test_all_empty_backends_return_zero_results():
    aggregator = MultiSourceSearchAggregator(FakeTransport(), BACKENDS, result_count=10)

    response = await aggregator.search("rust developer")

    assert response.total == 0
    assert response.per_backend_counts == {"Alpha": 0, "Beta": 0, "Gamma": 0}
    assert response.errors == []
    assert "No results found." in present_search(response)


@pytest.mark.asyncio
async def test_each_backend_gets_one_scoped_query():
    transport = FakeTransport()
    aggregator = MultiSourceSearchAggregator(transport, BACKENDS, result_count=10)

    await aggregator.search("найди кандидатов: Python разработчик")

    assert sorted(transport.queries) == [
        "Python разработчик site:alpha.example",
        "Python разработчик site:beta.example",
        "Python разработчик site:gamma.example",
    ]


@pytest.mark.asyncio
async def test_duplicates_across_backends_are_kept_with_provenance():
    same = [RawSearchHit(title="Same", link="https://shared.example/1")]
    transport = FakeTransport({"alpha.example": same, "beta.example": same})
    aggregator = MultiSourceSearchAggregator(transport, BACKENDS, result_count=10)

    response = await aggregator.search("devops")

    assert [(i.source_name, i.source_domain, i.link) for i in response.items] == [
        ("Alpha", "alpha.example", "https://shared.example/1"),
        ("Beta", "beta.example", "https://shared.example/1"),
    ]


@pytest.mark.asyncio
async def test_backends_run_concurrently():
    class BarrierTransport(SearchTransport):
        def __init__(self, expected: int):
            self.expected = expected
            self.started = 0
            self.all_started = asyncio.Event()

        async def query(self, backend_query, locale, result_count):
            self.started += 1
            if self.started == self.expected:
                self.all_started.set()
            await self.all_started.wait()
            return [RawSearchHit(title=backend_query)]

    aggregator = MultiSourceSearchAggregator(BarrierTransport(len(BACKENDS)), BACKENDS)

    response = await asyncio.wait_for(aggregator.search("qa engineer"), timeout=2)

    assert response.total == len(BACKENDS)


@pytest.mark.asyncio
async def test_merge_order_follows_backends_not_completion():
    class SlowFirstTransport(FakeTransport):
        async def query(self, backend_query, locale, result_count):
            if backend_query.endswith("alpha.example"):
                await asyncio.sleep(0.02)
            return await super().query(backend_query, locale, result_count)

    transport = SlowFirstTransport({d.domain: _hits(d.name.lower(), 1) for d in BACKENDS})
    aggregator = MultiSourceSearchAggregator(transport, BACKENDS, result_count=10)

    response = await aggregator.search("golang")

    assert [i.source_name for i in response.items] == ["Alpha", "Beta", "Gamma"]


@pytest.mark.asyncio
async def test_search_subset_of_backends():
    transport = FakeTransport({"gamma.example": _hits("gamma", 1)})
    aggregator = MultiSourceSearchAggregator(transport, BACKENDS, result_count=10)

    response = await aggregator.search("designer", backends=BACKENDS[2:])

    assert response.per_backend_counts == {"Gamma": 1}
    assert transport.queries == ["designer site:gamma.example"]


@pytest.mark.asyncio
async def test_unconfigured_transport_raises_configuration_missing():
    class Unconfigured(FakeTransport):
        @property
        def is_configured(self) -> bool:
            return False

    transport = Unconfigured()
    aggregator = MultiSourceSearchAggregator(transport, BACKENDS)

    with pytest.raises(ConfigurationMissing):
        await aggregator.search("python")
    assert transport.queries == []


@pytest.mark.asyncio
async def test_failed_and_empty_backends_keep_their_icons():
    transport = FakeTransport({"alpha.example": _hits("alpha", 1)})
    transport.failing["beta.example"] = BackendFailure("Beta", "timeout")
    aggregator = MultiSourceSearchAggregator(transport, BACKENDS, result_count=10)

    response = await aggregator.search("python developer")
    text = present_search(response)

    assert response.backend_icons == {"Alpha": "A", "Beta": "B", "Gamma": "G"}
    assert "  B Beta: 0 (failed)" in text
    assert "  G Gamma: 0" in text
