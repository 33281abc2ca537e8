from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.sql import func

from careerlink.database import Base


class CompanyProfile(Base):
    __tablename__ = "company_profiles"

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False)
    industry = Column(String(120), nullable=False, index=True)
    size = Column(String(50), nullable=False)
    founded = Column(Integer, nullable=True)
    headquarters = Column(String(255), nullable=False)
    website = Column(String(512), nullable=True)
    logo = Column(String(512), nullable=True)

    technologies = Column(JSON, nullable=False, default=list)
    locations = Column(JSON, nullable=False, default=list)
    benefits = Column(JSON, nullable=False, default=list)
    values = Column(JSON, nullable=False, default=list)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
