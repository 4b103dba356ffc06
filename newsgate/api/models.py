from __future__ import annotations

from pydantic import BaseModel, field_validator

from ..domain.models import CategoryGroup


class LoginRequest(BaseModel):
    """Credentials posted by the admin login form."""

    identifier: str
    password: str

    @field_validator("identifier")
    @classmethod
    def _identifier_present(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Username or phone is required")
        return value

    @field_validator("password")
    @classmethod
    def _password_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Password is required")
        return value


class CategoryGroupsResponse(BaseModel):
    """All navigation groups, keyed by slug."""

    success: bool = True
    groups: dict[str, CategoryGroup]
    total_groups: int


class CategoryGroupResponse(BaseModel):
    success: bool = True
    group: CategoryGroup
