"""Tests for lp_common.errors and lp_common.response."""

from src.lp_common.errors import (
    AppError,
    ConflictRetryableError,
    IdempotencyConflictError,
    InsufficientPointsError,
    IntegrityViolationError,
    LedgerIntegrityError,
    LockOrderViolationError,
    MemberAlreadyEnrolledError,
    MemberNotFoundError,
    NotFoundError,
    OutOfStockError,
    PreconditionFailedError,
    RedemptionNotFoundError,
    ReversalNotAllowedError,
    RewardInactiveError,
    RewardNotFoundError,
)
from src.lp_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_custom_http_status(self) -> None:
        err = AppError(code=2003, message="Already enrolled", http_status=409)
        assert err.http_status == 409

    def test_is_exception(self) -> None:
        err = AppError(code=1001, message="test")
        assert isinstance(err, Exception)


class TestCategories:
    def test_not_found_family(self) -> None:
        for err in (
            MemberNotFoundError("m-1"),
            RewardNotFoundError("r-1"),
            RedemptionNotFoundError(7),
        ):
            assert isinstance(err, NotFoundError)
            assert err.http_status == 404

    def test_precondition_family(self) -> None:
        for err in (
            InsufficientPointsError(required=120, available=30),
            RewardInactiveError("r-1"),
            OutOfStockError("r-1"),
            ReversalNotAllowedError("TXN-1", "already reversed"),
        ):
            assert isinstance(err, PreconditionFailedError)
            assert err.http_status == 422

    def test_integrity_family(self) -> None:
        for err in (
            LedgerIntegrityError("balance drift"),
            LockOrderViolationError("REWARD:r-1", "MEMBER:m-1"),
        ):
            assert isinstance(err, IntegrityViolationError)
            assert err.http_status == 500

    def test_conflict_retryable(self) -> None:
        err = ConflictRetryableError()
        assert err.code == 9003
        assert err.http_status == 409


class TestSpecificErrors:
    def test_insufficient_points(self) -> None:
        err = InsufficientPointsError(required=120, available=30)
        assert err.code == 2002
        assert "120" in err.message
        assert "30" in err.message

    def test_member_not_found(self) -> None:
        err = MemberNotFoundError("m-123")
        assert err.code == 2001
        assert "m-123" in err.message

    def test_member_already_enrolled(self) -> None:
        err = MemberAlreadyEnrolledError("user-9")
        assert err.code == 2003
        assert err.http_status == 409

    def test_reward_inactive_carries_reason(self) -> None:
        err = RewardInactiveError("r-1", "outside validity window")
        assert err.code == 3002
        assert "outside validity window" in err.message

    def test_out_of_stock(self) -> None:
        assert OutOfStockError("r-1").code == 3003

    def test_idempotency_conflict(self) -> None:
        err = IdempotencyConflictError("key-1")
        assert err.code == 4004
        assert err.http_status == 409

    def test_lock_order_violation_names_both_locks(self) -> None:
        err = LockOrderViolationError("REWARD:r-1", "MEMBER:m-1")
        assert err.code == 9005
        assert "REWARD:r-1" in err.message
        assert "MEMBER:m-1" in err.message


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": "abc"})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": "abc"}

    def test_error(self) -> None:
        resp = error_response(2002, "Insufficient points")
        assert resp.code == 2002
        assert resp.message == "Insufficient points"
        assert resp.data is None

    def test_serialization(self) -> None:
        resp = success_response({"available_points": 150})
        d = resp.model_dump()
        assert set(d) == {"code", "message", "data", "timestamp", "request_id"}
        assert isinstance(resp, ApiResponse)
