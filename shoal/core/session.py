"""Session resolution: turn the session header into a scoped store handle.

No header gives the read-only template view. A header that isn't valid
UTF-8, or names a session that doesn't exist or has expired, is rejected.
"""

from fastapi import Depends, Request

from shoal.config import settings
from shoal.core.errors import SessionNotFoundError
from shoal.dependencies import get_store
from shoal.services.store import SessionStore, Store


def _raw_header(request: Request, name: str) -> bytes | None:
    """Header value as sent on the wire (Starlette decodes as latin-1)."""
    key = name.lower().encode("latin-1")
    for header_name, value in request.headers.raw:
        if header_name.lower() == key:
            return value
    return None


async def get_session_store(
    request: Request,
    store: Store = Depends(get_store),
) -> SessionStore:
    """FastAPI dependency: resolve the caller's session and return its scope.

    Raises SessionNotFoundError (400) for unreadable, unknown or expired tokens.
    """
    raw = _raw_header(request, settings.session_header)
    if raw is None:
        return store.scoped(None)

    try:
        session_id = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise SessionNotFoundError(raw)

    if not await store.session_exists_and_live(session_id):
        raise SessionNotFoundError(raw)

    request.state.session_id = session_id
    return store.scoped(session_id)
