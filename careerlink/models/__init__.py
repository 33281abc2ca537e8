from careerlink.models.company import CompanyProfile
from careerlink.models.jobs import Job
from careerlink.models.mentorship import MentorshipProgram, ProgramContent, ProgramEnrollment
from careerlink.models.skill_match import SkillMatch
from careerlink.models.user import User

__all__ = [
	"CompanyProfile",
	"Job",
	"MentorshipProgram",
	"ProgramContent",
	"ProgramEnrollment",
	"SkillMatch",
	"User",
]
