"""Debug route: echo any request back as JSON."""

import json

from fastapi import APIRouter, Request

from shoal.schemas.anything import AnythingResponse

router = APIRouter(tags=["debug"])

_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def _group_query_params(items: list[tuple[str, str]]) -> dict[str, str | list[str]]:
    """One value stays a string, repeated names collect into a list."""
    grouped: dict[str, str | list[str]] = {}
    for name, value in items:
        existing = grouped.get(name)
        if existing is None:
            grouped[name] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            grouped[name] = [existing, value]
    return grouped


def _group_headers(items: list[tuple[str, str]]) -> dict[str, str]:
    grouped: dict[str, str] = {}
    for name, value in items:
        if name in grouped:
            grouped[name] = f"{grouped[name]}, {value}"
        else:
            grouped[name] = value
    return grouped


def _request_uri(request: Request) -> str:
    """Path plus query string, as sent on the request line."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


@router.api_route(
    "/anything", methods=_METHODS,
    response_model=AnythingResponse, include_in_schema=False,
)
@router.api_route(
    "/anything/{path:path}", methods=_METHODS,
    response_model=AnythingResponse, include_in_schema=False,
)
async def anything(request: Request):
    """Accept any request and describe it, similar to httpbin."""
    body = await request.body()
    try:
        parsed = json.loads(body)
    except ValueError:
        parsed = None

    return AnythingResponse(
        method=request.method,
        url=_request_uri(request),
        args=_group_query_params(request.query_params.multi_items()),
        headers=_group_headers(request.headers.items()),
        data=body.decode("utf-8", errors="replace"),
        json_body=parsed,
    )
