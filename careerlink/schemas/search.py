from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from careerlink.schemas.company import CompanyOut
from careerlink.schemas.user import UserRead


class UnifiedSearchResponse(BaseModel):
    success: bool = True
    query: str
    type: str
    total_results: int
    results: dict[str, list[dict[str, Any]]]
    failed_categories: list[str] = Field(default_factory=list)


class UserSearchResponse(BaseModel):
    success: bool = True
    role: str
    count: int
    total: int
    page: int
    pages: int
    users: list[UserRead]


class CompanySearchResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    page: int
    pages: int
    companies: list[CompanyOut]
