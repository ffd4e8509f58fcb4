from pydantic import BaseModel, Field, root_validator, validator
from typing import Any, Dict, List, Optional

from resume_ats.models.models import StudentContext

# Input schemas for the resume ATS endpoints


class ResumeUploadPayload(BaseModel):
    """Already-extracted resume text"""
    file_name: str = "resume.txt"
    text: str


class ScorePayload(BaseModel):
    """Stateless scoring request; the scorer validates both inputs itself"""
    resume_text: Optional[Any]
    requirements: Optional[Dict[str, Any]]
    extra_synonyms: Dict[str, List[str]] = Field(default_factory=dict)


class AnalyzePayload(BaseModel):
    """Analyze a stored resume (or inline text) against a company and role"""
    resume_id: Optional[str] = None
    resume_text: Optional[str] = None
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    target_role: str
    student: Optional[StudentContext] = None
    include_feedback: bool = True

    @root_validator(skip_on_failure=True)
    def check_sources(cls, values):
        if not values.get('resume_id') and values.get('resume_text') is None:
            raise ValueError('resume_id or resume_text is required')
        if not values.get('company_id') and not values.get('company_name'):
            raise ValueError('company_id or company_name is required')
        if not (values.get('target_role') or '').strip():
            raise ValueError('target_role must not be empty')
        return values


class RequirementsPayload(BaseModel):
    """Company requirement record; role defaults fill omitted fields"""
    company_id: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    required_skills: List[str] = Field(default_factory=list)
    keywords: Optional[List[str]] = None
    project_expectations: Optional[str] = None
    min_experience_months: int = Field(default=0, ge=0)
    preferred_sections: Optional[List[str]] = None

    @validator('company_id', 'company_name', 'role')
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError('must be a non-empty string')
        return v
