import json
from uuid import UUID

from loguru import logger
from redis.asyncio import Redis

from app.models import BookingType
from app.settings import CATALOG_CACHE_TTL, REDIS_URL

_redis: Redis | None = None


def get_redis() -> Redis:
    global _redis
    if _redis is None:
        _redis = Redis.from_url(REDIS_URL, decode_responses=True)
    return _redis


def _item_key(kind: BookingType, item_id: UUID) -> str:
    return f"catalog:{kind}:{item_id}"


async def get_item_cache(kind: BookingType, item_id: UUID) -> dict | None:
    try:
        data = await get_redis().get(_item_key(kind, item_id))
        return json.loads(data) if data else None
    except Exception:
        logger.warning("Redis get failed, skipping catalog cache", exc_info=True)
        return None


async def set_item_cache(kind: BookingType, item_id: UUID, item: dict) -> None:
    try:
        await get_redis().setex(
            _item_key(kind, item_id), CATALOG_CACHE_TTL, json.dumps(item)
        )
    except Exception:
        logger.warning("Redis set failed, skipping catalog cache", exc_info=True)


async def invalidate_item_cache(kind: BookingType, item_id: UUID) -> None:
    try:
        await get_redis().delete(_item_key(kind, item_id))
    except Exception:
        logger.warning("Redis invalidate failed for catalog cache", exc_info=True)
