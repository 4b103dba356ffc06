from __future__ import annotations

import asyncio
from typing import Any

from pydantic import ValidationError

from ..domain.categories import is_group, normalize_category_slug, parent_group
from ..domain.models import BackendGroupEnvelope, BackendSlugsEnvelope, CategoryGroup
from ..errors import BackendContractError, InvalidRequest, ProxyError
from .relay import BackendRelay

__all__ = ["resolve_group_slug", "group_path", "parse_group", "fetch_group", "collect_groups"]


def resolve_group_slug(value: str) -> str:
    """Normalize a requested slug; leaf categories resolve to their group."""
    slug = normalize_category_slug(value)
    if not slug:
        raise InvalidRequest("Valid category slug is required", field="slug")
    if not is_group(slug):
        slug = parent_group(slug) or slug
    return slug


def group_path(slug: str) -> str:
    return f"/api/category-groups/{slug}"


def parse_group(data: dict[str, Any], slug: str) -> CategoryGroup:
    """Validate a backend group body and shape it for the site."""
    try:
        envelope = BackendGroupEnvelope.model_validate(data)
    except ValidationError as e:
        raise BackendContractError(
            f"Invalid data for category group '{slug}'", error=str(e), slug=slug
        ) from e
    if not envelope.success or envelope.group is None:
        raise BackendContractError(f"Invalid data for category group '{slug}'", slug=slug)
    return CategoryGroup.from_backend(envelope.group)


async def fetch_group(relay: BackendRelay, slug: str, headers: dict[str, str]) -> CategoryGroup:
    """Fetch one category group.

    Raises:
        ProxyError: on any backend failure (transport, status, contract).
    """
    response = await relay.send("GET", group_path(slug), headers=headers)
    if not response.is_success:
        raise ProxyError(
            f"Failed to fetch category group '{slug}'",
            backend_status=response.status_code,
            slug=slug,
        )
    return parse_group(relay.read_json(response), slug)


async def collect_groups(relay: BackendRelay, headers: dict[str, str]) -> dict[str, CategoryGroup]:
    """Fetch every category group concurrently, keyed by slug.

    - Lists the slugs first; failing to list them fails the whole call
    - Groups that fail individually are left out and logged
    """
    response = await relay.send("GET", "/api/category-groups/slugs", headers=headers)
    if not response.is_success:
        raise ProxyError(
            "Failed to fetch category groups",
            backend_status=response.status_code,
            groups={},
        )
    data = relay.read_json(response)
    try:
        envelope = BackendSlugsEnvelope.model_validate(data)
    except ValidationError as e:
        raise ProxyError("Invalid slugs data", error=str(e), groups={}) from e
    if not envelope.success or envelope.slugs is None:
        raise ProxyError("Invalid slugs data", groups={})

    slugs = envelope.slugs
    results = await asyncio.gather(
        *(fetch_group(relay, slug, headers) for slug in slugs), return_exceptions=True
    )

    groups: dict[str, CategoryGroup] = {}
    for slug, res in zip(slugs, results):
        if isinstance(res, BaseException):
            if not isinstance(res, Exception):
                raise res
            relay.logger.warning(
                "categories.group_skipped",
                extra={"event": "group_skipped", "slug": slug, "error": str(res)},
            )
            continue
        groups[res.slug] = res

    relay.logger.info(
        "categories.summary",
        extra={
            "event": "categories_summary",
            "requested": len(slugs),
            "returned": len(groups),
        },
    )
    return groups
