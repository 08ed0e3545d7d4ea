from uuid import UUID

from fastapi import APIRouter, Depends

from app import inventory
from app.crud import favorite_crud
from app.deps import CurrentUser, get_current_user
from app.models import FavoriteCategory
from app.schemas import FavoritesResponse, FavoriteStatus

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("/", response_model=FavoritesResponse)
async def list_favorites(
    current_user: CurrentUser = Depends(get_current_user),
) -> FavoritesResponse:
    return await favorite_crud.list_favorites(current_user.id)


@router.get("/{category}/{item_id}", response_model=FavoriteStatus)
async def get_favorite_status(
    category: FavoriteCategory,
    item_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
) -> FavoriteStatus:
    is_favorite = await favorite_crud.is_favorite(current_user.id, category, item_id)
    return FavoriteStatus(category=category, item_id=item_id, is_favorite=is_favorite)


@router.post("/{category}/{item_id}", response_model=FavoritesResponse)
async def add_favorite(
    category: FavoriteCategory,
    item_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
) -> FavoritesResponse:
    # 404 for items that do not exist
    await inventory.resolve(category.booking_type, item_id)
    return await favorite_crud.add_favorite(current_user.id, category, item_id)


@router.delete("/{category}/{item_id}", response_model=FavoritesResponse)
async def remove_favorite(
    category: FavoriteCategory,
    item_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
) -> FavoritesResponse:
    return await favorite_crud.remove_favorite(current_user.id, category, item_id)
