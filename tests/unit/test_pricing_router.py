"""HTTP tests for the pricing endpoints (ASGI client, fake state source)."""

import pytest

BASE = "/api/v1/markets"


@pytest.fixture
def market(source):
    source.add_market("0xm", {4: 500_000, 5: 800_000, 6: 300_000})
    return source


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestMarketState:
    @pytest.mark.asyncio
    async def test_summary(self, client, market) -> None:
        resp = await client.get(f"{BASE}/0xm/state")

        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        data = body["data"]
        assert data["market_id"] == "0xm"
        assert data["alpha"] == 1_000_000
        assert data["active_buckets"] == 3
        assert data["bucket_count"] == 101
        assert data["distribution"] == {"4": 500_000, "5": 800_000, "6": 300_000}

    @pytest.mark.asyncio
    async def test_not_found_envelope(self, client) -> None:
        resp = await client.get(f"{BASE}/0xnone/state")

        assert resp.status_code == 404
        body = resp.json()
        assert body["code"] == 3001
        assert body["data"] is None
        assert "0xnone" in body["message"]

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client, market) -> None:
        resp = await client.get(f"{BASE}/0xm/state")
        assert resp.headers["X-Request-ID"] == resp.json()["request_id"]


class TestProbability:
    @pytest.mark.asyncio
    async def test_probability(self, client, source) -> None:
        source.add_market("0xu", {0: 0, 1: 0, 2: 0, 3: 0})

        resp = await client.get(f"{BASE}/0xu/probability", params={"range_min": 0, "range_max": 200})

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["probability"] == pytest.approx(50.0)
        assert (data["range_min"], data["range_max"]) == (0, 200)

    @pytest.mark.asyncio
    async def test_inverted_range_is_400(self, client, market) -> None:
        resp = await client.get(f"{BASE}/0xm/probability", params={"range_min": 600, "range_max": 500})

        assert resp.status_code == 400
        assert resp.json()["code"] == 4002
        assert market.object_calls == 0

    @pytest.mark.asyncio
    async def test_missing_param_is_422(self, client, market) -> None:
        resp = await client.get(f"{BASE}/0xm/probability", params={"range_min": 0})
        assert resp.status_code == 422


class TestBuyQuote:
    @pytest.mark.asyncio
    async def test_buy_quote(self, client, market) -> None:
        resp = await client.get(
            f"{BASE}/0xm/quotes/buy",
            params={"range_min": 500, "range_max": 600, "amount": 50_000, "slippage": 0.05},
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["shares"] > 0
        assert 0 < data["cost"] <= 50_000
        assert data["min_shares_out"] == data["shares"] - data["shares"] * 5 // 100

    @pytest.mark.asyncio
    async def test_negative_amount_is_400(self, client, market) -> None:
        resp = await client.get(
            f"{BASE}/0xm/quotes/buy", params={"range_min": 500, "range_max": 600, "amount": -5}
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 4003

    @pytest.mark.asyncio
    async def test_bad_slippage_is_400(self, client, market) -> None:
        resp = await client.get(
            f"{BASE}/0xm/quotes/buy",
            params={"range_min": 500, "range_max": 600, "amount": 5, "slippage": 2},
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 4004


class TestSellQuote:
    @pytest.mark.asyncio
    async def test_sell_quote(self, client, market) -> None:
        resp = await client.get(
            f"{BASE}/0xm/quotes/sell",
            params={"range_min": 500, "range_max": 600, "shares": 200_000},
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["payout"] > 0
        assert data["min_usdc_out"] <= data["payout"]
        assert data["payout_usdc"] == data["payout"] / 1_000_000

    @pytest.mark.asyncio
    async def test_emptying_market_is_500(self, client, source) -> None:
        source.add_market("0xone", {5: 100_000})
        resp = await client.get(
            f"{BASE}/0xone/quotes/sell",
            params={"range_min": 500, "range_max": 600, "shares": 100_000},
        )
        assert resp.status_code == 500
        assert resp.json()["code"] == 9003


class TestFloatRangeLimits:
    @pytest.mark.asyncio
    async def test_huge_budget_quotes_up_to_cap(self, client, market) -> None:
        resp = await client.get(
            f"{BASE}/0xm/quotes/buy",
            params={"range_min": 500, "range_max": 600, "amount": str(10**400)},
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["shares"] == 1_000_000

    @pytest.mark.asyncio
    async def test_alpha_beyond_float_range_is_500_envelope(self, client, source) -> None:
        source.add_market("0xbig", {5: 10, 6: 0}, alpha=10**400)

        resp = await client.get(
            f"{BASE}/0xbig/quotes/sell",
            params={"range_min": 500, "range_max": 600, "shares": 1},
        )

        assert resp.status_code == 500
        body = resp.json()
        assert body["code"] == 9003
        assert body["data"] is None
