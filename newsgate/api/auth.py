from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..domain.cookies import LEGACY_SESSION_COOKIE, SESSION_COOKIE, expire_cookie, relay_set_cookies
from ..errors import InvalidRequest, ProxyError
from ..service.relay import JSON_CONTENT_TYPE, BackendRelay, read_json_body
from .deps import get_relay
from .models import LoginRequest
from .routing import AdminRoute

router = APIRouter(prefix="/api/admin/auth", route_class=AdminRoute, tags=["auth"])


@router.options("/login", include_in_schema=False)
@router.options("/logout", include_in_schema=False)
async def preflight() -> Response:
    return JSONResponse({}, status_code=200)


@router.post("/login", summary="Log in to the admin console")
async def login(request: Request, relay: BackendRelay = Depends(get_relay)) -> Response:
    """Check the credentials are present and let the backend issue the session."""
    payload = await read_json_body(request)
    try:
        creds = LoginRequest.model_validate(payload)
    except ValidationError as e:
        errors = {str(err["loc"][0]): err["msg"] for err in e.errors() if err["loc"]}
        raise InvalidRequest("Invalid login request", fields=errors) from e

    headers = relay.forward_headers(request, content_type=JSON_CONTENT_TYPE)
    response = await relay.send(
        "POST", "/api/admin/auth/login", headers=headers, json=creds.model_dump()
    )
    return relay.relay(response)


@router.post("/logout", summary="Log out of the admin console")
async def logout(request: Request, relay: BackendRelay = Depends(get_relay)) -> Response:
    """Tell the backend, then clear both session cookies no matter what it said.

    A browser asking to log out always ends up logged out locally. An
    unreachable backend or a non-JSON reply degrades to a plain success; a
    JSON reply, error or not, is relayed with the backend status.
    """
    try:
        headers = relay.forward_headers(request, content_type=JSON_CONTENT_TYPE)
        response = await relay.send("POST", "/api/admin/auth/logout", headers=headers)
        out = JSONResponse(relay.read_json(response), status_code=response.status_code)
        relay_set_cookies(response, out)
    except ProxyError as e:
        relay.logger.warning(
            "logout.backend_failed",
            extra={"event": "logout_backend_failed", "code": e.code, "detail": e.message},
        )
        out = JSONResponse({"success": True, "message": "Logged out"}, status_code=200)

    for name in (SESSION_COOKIE, LEGACY_SESSION_COOKIE):
        expire_cookie(out, name, production=relay.settings.production)
    return out
