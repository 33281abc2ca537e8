from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class JobDetails(BaseModel):
    title: str
    company: str | None = None
    location: str | None = None
    job_type: str | None = None
    experience: str | None = None
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class StudentDetails(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str
    skills: list[str] | None = None
    university: str | None = None

    model_config = ConfigDict(from_attributes=True)


class SkillMatchOut(BaseModel):
    student_id: int
    job_id: int
    matched_skills: list[str]
    match_percentage: float
    total_job_skills: int
    student_matching_skills_count: int
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CalculatedJobMatch(BaseModel):
    job_id: int
    job_title: str
    company: str | None = None
    location: str | None = None
    matched_skills: list[str]
    match_percentage: float
    total_job_skills: int
    student_matching_skills_count: int
    persisted: bool = True


class CalculateMatchesResponse(BaseModel):
    success: bool = True
    student_id: int
    student_skills: list[str]
    total_jobs: int
    matches: list[CalculatedJobMatch]


class StudentMatchItem(SkillMatchOut):
    job_details: JobDetails | None = None


class StudentMatchesResponse(BaseModel):
    success: bool = True
    student_id: int
    total_matches: int
    matches: list[StudentMatchItem]


class JobCandidateItem(SkillMatchOut):
    student_details: StudentDetails | None = None


class JobCandidatesResponse(BaseModel):
    success: bool = True
    job_id: int
    job_title: str
    total_candidates: int
    matches: list[JobCandidateItem]


class SingleMatchOut(SkillMatchOut):
    calculated: bool = False


class SingleMatchResponse(BaseModel):
    success: bool = True
    match: SingleMatchOut
