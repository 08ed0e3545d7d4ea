"""
Hotels, restaurants and attractions: the items a booking can point at.

The three resources share one set of endpoints; `build_catalog_router` is
called once per kind with that kind's request and response schemas.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from loguru import logger
from pydantic import BaseModel

from app.cache import invalidate_item_cache
from app.crud import catalog_crud
from app.deps import CurrentUser, get_current_user, require_admin
from app.errors import NotFoundError
from app.models import BookingType
from app.schemas import (
    AttractionCreate,
    AttractionResponse,
    AttractionUpdate,
    CatalogFilters,
    HotelCreate,
    HotelResponse,
    HotelUpdate,
    RestaurantCreate,
    RestaurantResponse,
    RestaurantUpdate,
)


def build_catalog_router(
    kind: BookingType,
    prefix: str,
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    response_schema: type[BaseModel],
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])

    @router.get("/", response_model=list[response_schema])  # type: ignore[valid-type]
    async def list_items(
        filters: CatalogFilters = Depends(),
        _: CurrentUser = Depends(get_current_user),
    ):
        return await catalog_crud.list_items(kind, filters)

    @router.get("/top-rated", response_model=list[response_schema])  # type: ignore[valid-type]
    async def top_rated(
        limit: int = Query(default=5, ge=1, le=50),
        _: CurrentUser = Depends(get_current_user),
    ):
        return await catalog_crud.top_rated(kind, limit)

    @router.get("/by-state/{state}", response_model=list[response_schema])  # type: ignore[valid-type]
    async def list_by_state(
        state: str,
        _: CurrentUser = Depends(get_current_user),
    ):
        return await catalog_crud.list_items(kind, CatalogFilters(state=state))

    @router.get("/{item_id}", response_model=response_schema)
    async def get_item(
        item_id: UUID,
        _: CurrentUser = Depends(get_current_user),
    ):
        item = await catalog_crud.get_item(kind, item_id)
        if item is None:
            raise NotFoundError(f"No {kind} found with id {item_id}")
        return item

    @router.post(
        "/",
        response_model=response_schema,
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(require_admin)],
    )
    async def create_item(payload: create_schema):  # type: ignore[valid-type]
        item = await catalog_crud.create_item(kind, payload)
        logger.info("{} {} created", kind, item.id)  # type: ignore[attr-defined]
        return item

    @router.put(
        "/{item_id}",
        response_model=response_schema,
        dependencies=[Depends(require_admin)],
    )
    async def update_item(item_id: UUID, payload: update_schema):  # type: ignore[valid-type]
        item = await catalog_crud.update_item(kind, item_id, payload)
        if item is None:
            raise NotFoundError(f"No {kind} found with id {item_id}")
        await invalidate_item_cache(kind, item_id)
        return item

    @router.delete(
        "/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        dependencies=[Depends(require_admin)],
    )
    async def delete_item(item_id: UUID) -> None:
        deleted = await catalog_crud.delete_item(kind, item_id)
        if not deleted:
            raise NotFoundError(f"No {kind} found with id {item_id}")
        await invalidate_item_cache(kind, item_id)
        logger.info("{} {} deleted", kind, item_id)

    return router


hotels_router = build_catalog_router(
    BookingType.HOTEL, "/hotels", HotelCreate, HotelUpdate, HotelResponse
)
restaurants_router = build_catalog_router(
    BookingType.RESTAURANT,
    "/restaurants",
    RestaurantCreate,
    RestaurantUpdate,
    RestaurantResponse,
)
attractions_router = build_catalog_router(
    BookingType.ATTRACTION,
    "/attractions",
    AttractionCreate,
    AttractionUpdate,
    AttractionResponse,
)
