"""Auth routes: anonymous login."""

from fastapi import APIRouter, Depends

from shoal.dependencies import get_store
from shoal.schemas.session import LoginResponse
from shoal.services.store import Store

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(store: Store = Depends(get_store)):
    """Create a new temporary session with its own copy of the template fish."""
    session_id, expires_at = await store.create_session()
    return LoginResponse(id=session_id, expires_at=expires_at)
