from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from resume_ats.models.models import SectionScore


# -------- Resumes --------
class ResumeModel(BaseModel):
    resume_id: str
    student_id: str
    file_name: str = "resume.txt"
    parsed_text: str = ""
    created_at: datetime = Field(default_factory=datetime.utcnow)


# -------- Analyses --------
class AnalysisModel(BaseModel):
    analysis_id: str
    resume_id: Optional[str] = None   # None for inline-text analyses
    student_id: str
    company_name: str
    company_id: str
    target_role: str
    ats_score: int
    section_scores: List[SectionScore]
    matched_skills: List[str] = []
    missing_skills: List[str] = []
    matched_keywords: List[str] = []
    missing_keywords: List[str] = []
    feedback: Optional[Dict[str, Any]] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
