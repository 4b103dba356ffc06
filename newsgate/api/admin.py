from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from ..domain.payloads import parse_category_ids, parse_numeric_id
from ..errors import InvalidRequest
from ..service.relay import JSON_CONTENT_TYPE, BackendRelay, read_json_body, require_session
from .deps import get_relay
from .routing import AdminRoute

router = APIRouter(prefix="/api/admin", route_class=AdminRoute, tags=["admin"])

_NO_STORE = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}
_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


@router.options("/createposts", include_in_schema=False)
@router.options("/delete/{post_id}", include_in_schema=False)
@router.options("/categories", include_in_schema=False)
async def preflight() -> Response:
    """Answer CORS preflight locally; the backend is never contacted."""
    return JSONResponse({}, status_code=status.HTTP_200_OK)


async def _read_post_form(request: Request) -> tuple[bytes, dict[str, str], int]:
    """Return the raw form body plus its text fields and file count.

    The raw bytes are what gets forwarded, so multipart boundaries and file
    parts reach the backend exactly as the browser sent them.
    """
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith(_FORM_TYPES):
        raise InvalidRequest(
            "Failed to parse form data",
            error=f"unsupported content type: {content_type or 'none'}",
        )
    body = await request.body()
    try:
        async with request.form() as form:
            items = form.multi_items()
            fields = {key: value for key, value in items if isinstance(value, str)}
            file_count = sum(1 for _, value in items if not isinstance(value, str))
    except Exception as e:
        raise InvalidRequest("Failed to parse form data", error=str(e) or type(e).__name__) from e
    return body, fields, file_count


def _validate_post_fields(fields: dict[str, str]) -> None:
    if fields.get("category_ids"):
        parse_category_ids(fields["category_ids"])
    if fields.get("author_id"):
        parse_numeric_id(fields["author_id"], "author_id")


@router.post("/createposts", status_code=status.HTTP_201_CREATED, summary="Create a post")
async def create_post(request: Request, relay: BackendRelay = Depends(get_relay)) -> Response:
    """Forward a multipart post (fields plus images) to the backend."""
    require_session(request)
    body, fields, file_count = await _read_post_form(request)
    _validate_post_fields(fields)
    relay.logger.debug(
        "createposts.form",
        extra={
            "event": "createposts_form",
            "fields": sorted(fields),
            "file_count": file_count,
            "has_csrf": bool(request.headers.get("x-csrf-token")),
        },
    )
    headers = relay.forward_headers(request, content_type=request.headers["content-type"])
    response = await relay.send("POST", "/api/admin/createposts", headers=headers, content=body)
    return relay.relay(response, success_status=status.HTTP_201_CREATED)


@router.put("/createposts", summary="Update a post")
async def update_post(request: Request, relay: BackendRelay = Depends(get_relay)) -> Response:
    require_session(request)
    body, fields, _ = await _read_post_form(request)
    news_id = parse_numeric_id(fields.get("news_id"), "news_id")
    _validate_post_fields(fields)
    headers = relay.forward_headers(request, content_type=request.headers["content-type"])
    response = await relay.send(
        "PUT", f"/api/admin/createposts/{news_id}", headers=headers, content=body
    )
    return relay.relay(response)


@router.delete("/createposts", summary="Delete a post by body id")
async def delete_post_by_body(request: Request, relay: BackendRelay = Depends(get_relay)) -> Response:
    require_session(request)
    payload = await read_json_body(request)
    news_id = parse_numeric_id(payload.get("news_id"), "news_id")
    headers = relay.forward_headers(request, content_type=JSON_CONTENT_TYPE)
    response = await relay.send(
        "DELETE", f"/api/admin/createposts/{news_id}", headers=headers, json=payload
    )
    return relay.relay(response)


@router.delete("/delete/{post_id}", summary="Delete a post")
async def delete_post(
    post_id: str, request: Request, relay: BackendRelay = Depends(get_relay)
) -> Response:
    """Delete a post and its images; the id is checked before the session."""
    post_id = parse_numeric_id(post_id, "post ID")
    require_session(request)
    payload = None
    if request.headers.get("content-type", "").startswith(JSON_CONTENT_TYPE):
        payload = await read_json_body(request, required=False)
    headers = relay.forward_headers(
        request, content_type=JSON_CONTENT_TYPE if payload else None
    )
    response = await relay.send(
        "DELETE", f"/api/admin/delete/{post_id}", headers=headers, json=payload or None
    )
    return relay.relay(response, headers=_NO_STORE)


@router.get("/categories", summary="List categories for the post editor")
async def list_categories(request: Request, relay: BackendRelay = Depends(get_relay)) -> Response:
    response = await relay.send("GET", "/api/admin/categories", headers=relay.forward_headers(request))
    return relay.relay(response)
