"""Fish routes: list, get, create, update, delete within the caller's session."""

from fastapi import APIRouter, Depends, Path

from shoal.core.session import get_session_store
from shoal.schemas.fish import MAX_U32, FishCreate, FishRead, FishUpdate
from shoal.services.store import SessionStore

router = APIRouter(prefix="/fish", tags=["fish"])


@router.get("", response_model=list[FishRead])
async def list_fish(store: SessionStore = Depends(get_session_store)):
    return await store.list()


@router.post("", status_code=201, response_model=FishRead)
async def create_fish(
    body: FishCreate,
    store: SessionStore = Depends(get_session_store),
):
    return await store.create(body)


@router.get("/{fish_id}", response_model=FishRead)
async def get_fish(
    fish_id: int = Path(..., ge=0, le=MAX_U32),
    store: SessionStore = Depends(get_session_store),
):
    return await store.get(fish_id)


@router.patch("/{fish_id}", response_model=FishRead)
async def update_fish(
    body: FishUpdate,
    fish_id: int = Path(..., ge=0, le=MAX_U32),
    store: SessionStore = Depends(get_session_store),
):
    return await store.update(fish_id, body)


@router.delete("/{fish_id}", response_model=FishRead)
async def delete_fish(
    fish_id: int = Path(..., ge=0, le=MAX_U32),
    store: SessionStore = Depends(get_session_store),
):
    """Delete a fish and return it as it was."""
    return await store.delete(fish_id)
