"""Shared test fixtures."""

import asyncio
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.pm_pricing.infrastructure.sui_client import get_sui_client


def table_id_for(market_id: str) -> str:
    return f"0xtable_{market_id}"


def market_fields(
    buckets: dict[int, int],
    table_id: str = "0xtable",
    alpha: int = 1_000_000,
    bucket_width: int = 100,
    virtual_min: int = 0,
    virtual_max: int = 10_000,
    max_shares_per_bucket: int = 0,
    balance: str = "5000000",
) -> dict[str, Any]:
    """Market object fields shaped like sui_getObject(showContent) output."""
    return {
        "id": {"id": "0xmarket"},
        "balance": balance,
        "lmsr_state": {
            "type": "0x2::lmsr::LmsrState",
            "fields": {
                "liquidity_parameter": str(alpha),
                "max_shares_per_bucket": str(max_shares_per_bucket),
                "sparse_distribution": {
                    "type": "0x2::sparse::SparseDistribution",
                    "fields": {
                        "active_buckets": [str(b) for b in buckets],
                        "buckets": {
                            "type": "0x2::table::Table<u64, u64>",
                            "fields": {"id": {"id": table_id}, "size": str(len(buckets))},
                        },
                        "virtual_min": str(virtual_min),
                        "virtual_max": str(virtual_max),
                        "bucket_width": str(bucket_width),
                    },
                },
            },
        },
    }


class FakeStateSource:
    """In-memory MarketStateSourceProtocol.

    objects: object_id -> fields; tables: table_id -> {bucket_idx: shares}.
    Tracks call counts and the peak number of concurrent bucket reads.
    """

    def __init__(self) -> None:
        self.objects: dict[str, dict[str, Any]] = {}
        self.tables: dict[str, dict[int, int]] = {}
        self.object_calls = 0
        self.field_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    def add_market(self, market_id: str, buckets: dict[int, int], **kwargs: Any) -> None:
        table_id = table_id_for(market_id)
        self.objects[market_id] = market_fields(buckets, table_id=table_id, **kwargs)
        self.tables[table_id] = dict(buckets)

    async def get_object(self, object_id: str) -> dict[str, Any] | None:
        self.object_calls += 1
        return self.objects.get(object_id)

    async def get_dynamic_field(
        self, parent_id: str, name_type: str, name_value: str
    ) -> dict[str, Any] | None:
        assert name_type == "u64"
        self.field_calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
        finally:
            self.in_flight -= 1
        shares = self.tables.get(parent_id, {}).get(int(name_value))
        if shares is None:
            return None
        return {"id": {"id": f"0xrow{name_value}"}, "name": name_value, "value": str(shares)}


@pytest.fixture
def source() -> FakeStateSource:
    return FakeStateSource()


@pytest.fixture
async def client(source: FakeStateSource) -> AsyncClient:
    """Async HTTP client with the Sui client dependency swapped for the fake."""
    app.dependency_overrides[get_sui_client] = lambda: source
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
