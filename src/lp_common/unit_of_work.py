"""Unit of work — one durable transaction per ledger or settlement operation.

Every balance- or stock-mutating operation runs through run_in_transaction():
  1. SET LOCAL lock_timeout (bounded wait on row locks)
  2. work(uow): repositories lock rows FOR UPDATE, check, write
  3. COMMIT on success, ROLLBACK on any exception
  4. Retry the whole operation on serialization failure / deadlock / lock timeout

Lock ordering: rows are locked in ascending LockRank, and by ascending key
within one rank. Redemption locks REWARD then MEMBER; the accrual path only
ever locks one MEMBER. UnitOfWork.claim() enforces the order at runtime so a
new multi-entity operation cannot introduce a lock-order inversion silently.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import IntEnum
from typing import TypeVar

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.lp_common.errors import (
    ConflictRetryableError,
    IntegrityViolationError,
    LedgerIntegrityError,
    LockOrderViolationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# serialization_failure, deadlock_detected, lock_not_available
_RETRYABLE_SQLSTATES = frozenset({"40001", "40P01", "55P03"})


class LockRank(IntEnum):
    REWARD = 10
    MEMBER = 20


class UnitOfWork:
    """Session for one transaction attempt plus the row locks claimed so far."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self._held: list[tuple[LockRank, str]] = []

    @property
    def held_locks(self) -> list[tuple[LockRank, str]]:
        return list(self._held)

    def claim(self, rank: LockRank, key: str) -> None:
        """Record a row lock about to be taken. Re-claiming a held lock is a no-op."""
        if (rank, key) in self._held:
            return
        if self._held:
            top_rank, top_key = self._held[-1]
            if rank < top_rank or (rank == top_rank and key < top_key):
                raise LockOrderViolationError(
                    f"{rank.name}:{key}", f"{top_rank.name}:{top_key}"
                )
        self._held.append((rank, key))


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_retryable(exc: BaseException) -> bool:
    """True for DB errors where re-running the whole transaction is safe."""
    if not isinstance(exc, DBAPIError) or isinstance(exc, IntegrityError):
        return False
    return _sqlstate(exc) in _RETRYABLE_SQLSTATES


async def run_in_transaction(
    db: AsyncSession,
    work: Callable[[UnitOfWork], Awaitable[T]],
    *,
    operation: str,
    max_retries: int | None = None,
) -> T:
    """Run work(uow) as one transaction on db; commit, or roll back and re-raise.

    Retryable conflicts are retried up to max_retries extra times (default
    settings.TXN_MAX_RETRIES), then surface as ConflictRetryableError.
    Database integrity errors surface as LedgerIntegrityError and are never retried.
    """
    retries = settings.TXN_MAX_RETRIES if max_retries is None else max_retries
    attempt = 0
    while True:
        attempt += 1
        uow = UnitOfWork(db)
        try:
            if settings.LOCK_TIMEOUT_MS > 0:
                await db.execute(
                    text(f"SET LOCAL lock_timeout = '{int(settings.LOCK_TIMEOUT_MS)}ms'")
                )
            result = await work(uow)
            await db.commit()
            return result
        except IntegrityError as exc:
            await db.rollback()
            logger.critical("%s: database integrity error: %s", operation, exc.orig)
            raise LedgerIntegrityError(f"{operation}: {exc.orig}") from exc
        except DBAPIError as exc:
            await db.rollback()
            if not is_retryable(exc):
                raise
            if attempt > retries:
                logger.warning(
                    "%s: giving up after %d attempts (sqlstate=%s)",
                    operation, attempt, _sqlstate(exc),
                )
                raise ConflictRetryableError(
                    f"{operation} conflicted with a concurrent update, please retry"
                ) from exc
            logger.info(
                "%s: conflict (sqlstate=%s), retry %d/%d",
                operation, _sqlstate(exc), attempt, retries,
            )
        except IntegrityViolationError as exc:
            await db.rollback()
            logger.critical("%s aborted: %s (locks=%s)", operation, exc.message, uow.held_locks)
            raise
        except Exception:
            await db.rollback()
            raise
        await asyncio.sleep(settings.TXN_RETRY_BACKOFF_MS * attempt / 1000)
