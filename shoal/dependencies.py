from fastapi import Request

from shoal.services.store import Store


def get_store(request: Request) -> Store:
    """FastAPI dependency: the process-wide store created in the lifespan."""
    return request.app.state.store
