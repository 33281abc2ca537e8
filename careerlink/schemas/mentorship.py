from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


EnrollmentStatus = Literal["active", "completed", "withdrawn"]
ContentType = Literal["file", "link", "text", "assignment"]


class ProgramCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    topics: list[str] = Field(default_factory=list)
    duration_value: int = Field(ge=1)
    duration_unit: str = "weeks"
    cost: float = Field(default=0.0, ge=0)
    max_students: int = Field(default=1, ge=1)
    requirements: list[str] = Field(default_factory=list)
    learning_outcomes: list[str] = Field(default_factory=list)
    schedule: dict[str, Any] = Field(default_factory=dict)


class ProgramUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    topics: list[str] | None = None
    duration_value: int | None = Field(default=None, ge=1)
    duration_unit: str | None = None
    cost: float | None = Field(default=None, ge=0)
    max_students: int | None = Field(default=None, ge=1)
    requirements: list[str] | None = None
    learning_outcomes: list[str] | None = None
    schedule: dict[str, Any] | None = None
    is_active: bool | None = None


class EnrollmentOut(BaseModel):
    id: int
    program_id: int
    participant_id: int
    status: EnrollmentStatus
    enrolled_at: datetime
    status_changed_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ProgramOut(BaseModel):
    id: int
    alumni_id: int
    title: str
    description: str
    topics: list[str] = Field(default_factory=list)
    duration_value: int
    duration_unit: str
    cost: float
    max_students: int
    requirements: list[str] = Field(default_factory=list)
    learning_outcomes: list[str] = Field(default_factory=list)
    schedule: dict[str, Any] = Field(default_factory=dict)
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ProgramListItem(ProgramOut):
    active_enrollments: int
    available_slots: int
    is_full: bool
    is_enrolled: bool = False


class ProgramDetail(ProgramListItem):
    enrollments: list[EnrollmentOut] = Field(default_factory=list)


class ProgramListResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    page: int
    pages: int
    programs: list[ProgramListItem]


class ProgramResponse(BaseModel):
    success: bool = True
    message: str | None = None
    program: ProgramDetail


class EnrollmentStatusUpdate(BaseModel):
    status: EnrollmentStatus


class EnrollmentResponse(BaseModel):
    success: bool = True
    message: str | None = None
    enrollment: EnrollmentOut


class ContentCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    content_type: ContentType
    # Opaque reference: {"file_url": ..., "file_name": ..., "file_size": ...} or a link/text body.
    content: dict[str, Any] = Field(default_factory=dict)
    is_public: bool | None = None
    access_level: str | None = None


class ContentOut(BaseModel):
    id: int
    program_id: int
    title: str
    description: str | None = None
    content_type: ContentType
    content: dict[str, Any] = Field(default_factory=dict)
    is_public: bool
    access_level: str
    posted_by: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ContentListResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    page: int
    pages: int
    content: list[ContentOut]
