# jobs.py
from sqlalchemy import Boolean, Column, Integer, JSON, String, Text
from careerlink.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), index=True, nullable=False)
    company = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    job_type = Column(String(50), nullable=True)
    experience = Column(String(100), nullable=True)
    description = Column(Text, nullable=False, default="")
    # Required skills as a list of strings, original casing.
    skills = Column(JSON, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
