from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .categories import category_color, category_icon, group_order

__all__ = [
    "Category",
    "BackendCategoryGroup",
    "BackendGroupEnvelope",
    "BackendSlugsEnvelope",
    "CategoryGroup",
]


class Category(BaseModel):
    """A leaf category as the backend describes it."""

    model_config = ConfigDict(extra="ignore")

    category_id: int
    name: str
    slug: str
    parent_id: Optional[int] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class BackendCategoryGroup(BaseModel):
    model_config = ConfigDict(extra="ignore")

    slug: str
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None
    categories: list[Category] = Field(default_factory=list)


class BackendGroupEnvelope(BaseModel):
    """Body of `GET /api/category-groups/{slug}`."""

    model_config = ConfigDict(extra="ignore")

    success: bool
    group: Optional[BackendCategoryGroup] = None


class BackendSlugsEnvelope(BaseModel):
    """Body of `GET /api/category-groups/slugs`."""

    model_config = ConfigDict(extra="ignore")

    success: bool
    slugs: Optional[list[str]] = None


class CategoryGroup(BaseModel):
    """Navigation group handed to the public site."""

    slug: str
    mainSlug: str
    title: str
    icon: str
    description: Optional[str] = None
    color: str
    order: int
    categories: list[Category]

    @classmethod
    def from_backend(cls, group: BackendCategoryGroup) -> "CategoryGroup":
        return cls(
            slug=group.slug,
            mainSlug=group.slug,
            title=group.name,
            icon=group.icon or category_icon(group.slug),
            description=group.description,
            color=group.color or category_color(group.slug),
            order=group_order(group.slug),
            categories=group.categories,
        )
