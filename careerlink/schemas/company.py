from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CompanyCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    industry: str = Field(min_length=1)
    size: str = Field(min_length=1)
    headquarters: str = Field(min_length=1)
    founded: int | None = None
    website: str | None = None
    logo: str | None = None
    technologies: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    values: list[str] = Field(default_factory=list)


class CompanyUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    industry: str | None = None
    size: str | None = None
    headquarters: str | None = None
    founded: int | None = None
    website: str | None = None
    logo: str | None = None
    technologies: list[str] | None = None
    locations: list[str] | None = None
    benefits: list[str] | None = None
    values: list[str] | None = None


class CompanyOut(BaseModel):
    id: int
    employer_id: int
    name: str
    description: str
    industry: str
    size: str
    headquarters: str
    founded: int | None = None
    website: str | None = None
    logo: str | None = None
    technologies: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    values: list[str] = Field(default_factory=list)
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
