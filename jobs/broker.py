"""
Dramatiq broker configuration.

Redis-based message broker for background jobs.
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.middleware import CurrentMessage, ShutdownNotifications
from loguru import logger

from app.config.logging import setup_logging
from app.config.settings import settings

setup_logging()

redis_broker = RedisBroker(
    host=settings.redis_host,
    port=settings.redis_port,
    password=settings.redis_password if settings.redis_password else None,
    db=settings.redis_db,
)

# ShutdownNotifications: lets a running payout finish its current user
# CurrentMessage: gives actors access to the message id for logging
redis_broker.add_middleware(ShutdownNotifications())
redis_broker.add_middleware(CurrentMessage())

dramatiq.set_broker(redis_broker)

broker = redis_broker

logger.info(
    f"Dramatiq broker initialized: "
    f"redis://{settings.redis_host}:{settings.redis_port}/{settings.redis_db}"
)
