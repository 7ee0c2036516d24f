"""Tests for pm_common.errors and pm_common.response."""

from src.pm_common.errors import (
    AppError,
    ComputationError,
    InvalidInputError,
    InvalidRangeError,
    InvalidSlippageError,
    MalformedMarketStateError,
    MarketNotFoundError,
    NegativeQuantityError,
    StateSourceError,
)
from src.pm_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_custom_http_status(self) -> None:
        err = AppError(code=4001, message="bad", http_status=400)
        assert err.http_status == 400

    def test_is_exception(self) -> None:
        err = AppError(code=4001, message="test")
        assert isinstance(err, Exception)
        assert str(err) == "test"


class TestSpecificErrors:
    def test_market_not_found(self) -> None:
        err = MarketNotFoundError("0xabc")
        assert err.code == 3001
        assert err.http_status == 404
        assert "0xabc" in err.message

    def test_malformed_state(self) -> None:
        err = MalformedMarketStateError("0xabc", "bucket width missing")
        assert err.code == 3002
        assert err.http_status == 404
        assert "bucket width missing" in err.message

    def test_invalid_range(self) -> None:
        err = InvalidRangeError(500, 400)
        assert err.code == 4002
        assert err.http_status == 400
        assert "500" in err.message and "400" in err.message

    def test_input_errors_share_base(self) -> None:
        for err in (
            InvalidRangeError(1, 0),
            NegativeQuantityError("amount", -1),
            InvalidSlippageError(1.5),
        ):
            assert isinstance(err, InvalidInputError)
            assert err.http_status == 400

    def test_negative_quantity(self) -> None:
        err = NegativeQuantityError("shares", -5)
        assert err.code == 4003
        assert "shares" in err.message and "-5" in err.message

    def test_slippage(self) -> None:
        assert InvalidSlippageError(2).code == 4004

    def test_computation(self) -> None:
        err = ComputationError("exp overflow")
        assert err.code == 9003
        assert err.http_status == 500

    def test_state_source(self) -> None:
        err = StateSourceError("timeout")
        assert err.code == 9004
        assert err.http_status == 502


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"shares": 100})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"shares": 100}

    def test_error(self) -> None:
        resp = error_response(3001, "Market not found: 0xabc")
        assert resp.code == 3001
        assert resp.message == "Market not found: 0xabc"
        assert resp.data is None

    def test_request_id_generated(self) -> None:
        assert success_response().request_id.startswith("req_")

    def test_serialization(self) -> None:
        resp = success_response({"probability": 12.5})
        d = resp.model_dump()
        assert "code" in d
        assert "message" in d
        assert "data" in d
        assert "timestamp" in d
        assert "request_id" in d

    def test_default_envelope(self) -> None:
        resp = ApiResponse()
        assert resp.code == 0
        assert resp.data is None
