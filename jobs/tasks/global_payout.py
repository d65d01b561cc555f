"""
Global payout task.

Runs payout settlement for every user. Runs are serialized across workers
by a Redis lock; a run that finds the lock taken does nothing.
"""

import dramatiq
import redis.asyncio as redis
from loguru import logger
from redis.exceptions import LockError

from app.config.settings import settings
from app.services.payout import PayoutSettlementEngine
from jobs.async_runner import create_local_session, run_async
from jobs.broker import broker  # noqa: F401  (registers the broker)

LOCK_KEY = "global_payout_run"


@dramatiq.actor(max_retries=0, time_limit=settings.payout_run_lock_timeout * 1000)
def run_global_payout() -> dict:
    """
    Settle every user's referral points into pending payouts.

    Never retried; a failed run is inspected before being started again.
    """
    logger.info("Starting global payout run...")

    try:
        result = run_async(_run_global_payout_async())
    except Exception as e:
        logger.exception(f"Global payout run failed: {e}")
        raise

    if result is None:
        logger.warning("Global payout run skipped: another run holds the lock")
        return {"skipped": True}

    logger.info(
        f"Global payout run complete: {result['total_users']} settled, "
        f"{len(result['skipped'])} skipped, total {result['total_amount']}"
    )
    return result


async def _run_global_payout_async() -> dict | None:
    """Acquire the run lock and settle; None when the lock is taken."""
    redis_client = redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password or None,
        db=settings.redis_db,
    )
    lock = redis_client.lock(
        LOCK_KEY,
        timeout=settings.payout_run_lock_timeout,
        blocking=False,
    )

    try:
        if not await lock.acquire():
            return None

        try:
            async with create_local_session() as session:
                engine = PayoutSettlementEngine(session)
                result = await engine.run_global_payout()
                return result.to_dict()
        finally:
            try:
                await lock.release()
            except LockError:
                logger.warning("Global payout lock expired before release")
    finally:
        await redis_client.aclose()
