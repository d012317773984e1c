"""
Redis cache

Session records and the holiday-sale flag. Writes are best-effort: a missing
or failing Redis never fails the request that triggered the write.
"""
import json
import logging
import os
from typing import Any, Optional

import redis

logger = logging.getLogger(__name__)

REDIS_URL = os.getenv("REDIS_URL")
SESSION_TTL_SECONDS = 24 * 60 * 60
HOLIDAY_SALE_KEY = "holiday_sale_enabled"

client = redis.Redis.from_url(REDIS_URL, decode_responses=True) if REDIS_URL else None


def session_key(user_id: int) -> str:
    return f"session:{user_id}"


def set_data(key: str, value: Any, ttl: Optional[int] = None) -> bool:
    if client is None:
        return False
    try:
        client.set(key, json.dumps(value, default=str), ex=ttl)
        return True
    except redis.RedisError:
        logger.exception("Cache write failed for %s", key)
        return False


def remove_data(key: str) -> None:
    if client is None:
        return
    try:
        client.delete(key)
    except redis.RedisError:
        logger.exception("Cache delete failed for %s", key)


def set_holiday_sale_enabled(enabled: bool) -> bool:
    return set_data(HOLIDAY_SALE_KEY, enabled)


def is_holiday_sale_enabled() -> bool:
    if client is None:
        return False
    try:
        value = client.get(HOLIDAY_SALE_KEY)
    except redis.RedisError:
        logger.exception("Cache read failed for %s", HOLIDAY_SALE_KEY)
        return False
    return value == "true"


def ping() -> bool:
    if client is None:
        return False
    try:
        return bool(client.ping())
    except redis.RedisError:
        return False
