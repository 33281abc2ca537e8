# user.py
from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.sql import func
from careerlink.database import Base


USER_ROLES = ("student", "alumni", "employer", "admin")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    first_name = Column(String(120), nullable=True)
    last_name = Column(String(120), nullable=True)
    role = Column(String(20), nullable=False, default="student", index=True)

    # Profile skills in the casing the user typed them; normalized only for matching.
    skills = Column(JSON, nullable=True)
    bio = Column(Text, nullable=True)
    position = Column(String(255), nullable=True)
    university = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
