from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from ..service.categories import collect_groups, group_path, parse_group, resolve_group_slug
from ..service.relay import BackendRelay
from .deps import get_relay
from .models import CategoryGroupResponse, CategoryGroupsResponse
from .routing import ProxyRoute

router = APIRouter(prefix="/api/client", route_class=ProxyRoute, tags=["client"])


@router.get("/categories", summary="All category groups for the site navigation")
async def list_category_groups(
    request: Request, relay: BackendRelay = Depends(get_relay)
) -> Response:
    groups = await collect_groups(relay, relay.forward_headers(request))
    body = CategoryGroupsResponse(groups=groups, total_groups=len(groups))
    return JSONResponse(body.model_dump())


@router.get("/categories/{slug}", summary="One category group")
async def get_category_group(
    slug: str, request: Request, relay: BackendRelay = Depends(get_relay)
) -> Response:
    """Return a single group; a leaf category slug returns the group it belongs to."""
    group_slug = resolve_group_slug(slug)
    response = await relay.send("GET", group_path(group_slug), headers=relay.forward_headers(request))
    if not response.is_success:
        return relay.relay(response)
    group = parse_group(relay.read_json(response), group_slug)
    return JSONResponse(CategoryGroupResponse(group=group).model_dump())
