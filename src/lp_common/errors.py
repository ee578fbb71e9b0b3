"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Member
  3xxx: Reward catalog
  4xxx: Ledger
  5xxx: Redemption
  9xxx: System

Categories (isinstance-checkable):
  NotFoundError            — member/reward/record absent
  PreconditionFailedError  — business rule refused the operation, nothing written
  ConflictRetryableError   — lock/serialization conflict, safe to retry the whole operation
  IntegrityViolationError  — ledger state is inconsistent; a bug, never swallow
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class NotFoundError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


class PreconditionFailedError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 422)


class ConflictRetryableError(AppError):
    def __init__(self, detail: str = "Concurrent update conflict, please retry") -> None:
        super().__init__(9003, detail, 409)


class IntegrityViolationError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 500)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401)


# --- 2xxx: Member ---

class MemberNotFoundError(NotFoundError):
    def __init__(self, member_id: str) -> None:
        super().__init__(2001, f"Member not found: {member_id}")


class InsufficientPointsError(PreconditionFailedError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2002,
            f"Insufficient points: required {required}, available {available}",
        )


class MemberAlreadyEnrolledError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2003, f"User is already enrolled as a member: {user_id}", 409)


# --- 3xxx: Reward catalog ---

class RewardNotFoundError(NotFoundError):
    def __init__(self, reward_id: str) -> None:
        super().__init__(3001, f"Reward not found: {reward_id}")


class RewardInactiveError(PreconditionFailedError):
    def __init__(self, reward_id: str, reason: str = "status is not ACTIVE") -> None:
        super().__init__(3002, f"Reward is not active: {reward_id} ({reason})")


class OutOfStockError(PreconditionFailedError):
    def __init__(self, reward_id: str) -> None:
        super().__init__(3003, f"Reward is out of stock: {reward_id}")


class InvalidRewardWindowError(PreconditionFailedError):
    def __init__(self) -> None:
        super().__init__(3004, "valid_until must be after valid_from")


# --- 4xxx: Ledger ---

class InvalidPointsError(PreconditionFailedError):
    def __init__(self, points: int) -> None:
        super().__init__(4001, f"Points must be a positive integer, got {points}")


class LedgerEntryNotFoundError(NotFoundError):
    def __init__(self, reference_number: str) -> None:
        super().__init__(4002, f"Ledger entry not found: {reference_number}")


class ReversalNotAllowedError(PreconditionFailedError):
    def __init__(self, reference_number: str, reason: str) -> None:
        super().__init__(4003, f"Cannot reverse {reference_number}: {reason}")


class IdempotencyConflictError(AppError):
    def __init__(self, idempotency_key: str) -> None:
        super().__init__(
            4004,
            f"Idempotency key already used for a different request: {idempotency_key}",
            409,
        )


# --- 5xxx: Redemption ---

class RedemptionNotFoundError(NotFoundError):
    def __init__(self, redemption_id: int) -> None:
        super().__init__(5001, f"Redemption not found: {redemption_id}")


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class LedgerIntegrityError(IntegrityViolationError):
    def __init__(self, detail: str) -> None:
        super().__init__(9004, f"Ledger integrity violated: {detail}")


class LockOrderViolationError(IntegrityViolationError):
    def __init__(self, acquiring: str, held: str) -> None:
        super().__init__(
            9005, f"Lock order violated: acquiring {acquiring} while holding {held}"
        )
