from careerlink.schemas.company import CompanyCreate, CompanyOut, CompanyUpdate
from careerlink.schemas.mentorship import (
	ContentCreate,
	ContentOut,
	EnrollmentOut,
	EnrollmentStatusUpdate,
	ProgramCreate,
	ProgramDetail,
	ProgramListItem,
	ProgramOut,
	ProgramUpdate,
)
from careerlink.schemas.search import CompanySearchResponse, UnifiedSearchResponse, UserSearchResponse
from careerlink.schemas.skill_match import CalculateMatchesResponse, SingleMatchResponse, SkillMatchOut
from careerlink.schemas.user import Token, UserCreate, UserLogin, UserRead, UserUpdate

__all__ = [
	"CompanyCreate",
	"CompanyOut",
	"CompanyUpdate",
	"ContentCreate",
	"ContentOut",
	"EnrollmentOut",
	"EnrollmentStatusUpdate",
	"ProgramCreate",
	"ProgramDetail",
	"ProgramListItem",
	"ProgramOut",
	"ProgramUpdate",
	"CompanySearchResponse",
	"UnifiedSearchResponse",
	"UserSearchResponse",
	"CalculateMatchesResponse",
	"SingleMatchResponse",
	"SkillMatchOut",
	"Token",
	"UserCreate",
	"UserLogin",
	"UserRead",
	"UserUpdate",
]
