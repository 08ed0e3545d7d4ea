from uuid import UUID

from loguru import logger

from app.cache import get_item_cache, set_item_cache
from app.crud import catalog_crud
from app.errors import NotFoundError
from app.models import BookingType


async def resolve(kind: BookingType, target_id: UUID) -> dict:
    """
    Return the catalog item a booking or favorite points at, as a JSON-ready
    dict. Reads through the catalog cache; raises NotFoundError when no item
    of that kind has this id.
    """
    cached = await get_item_cache(kind, target_id)
    if cached is not None:
        logger.debug("Cache hit for catalog item: {} {}", kind, target_id)
        return cached

    logger.debug("Cache miss for catalog item: {} {}", kind, target_id)
    item = await catalog_crud.get_item(kind, target_id)
    if item is None:
        raise NotFoundError(f"No {kind} found with id {target_id}")

    data = item.model_dump(mode="json")
    await set_item_cache(kind, target_id, data)
    return data
