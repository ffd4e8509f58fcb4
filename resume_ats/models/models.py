from pydantic import BaseModel, Field, validator
from typing import Any, Dict, List, Optional, Literal

SECTION_ORDER = ("Skills Match", "Keywords", "Projects", "Experience", "Structure")


class CompanyRequirements(BaseModel):
    company_id: str
    company_name: str
    role: str
    required_skills: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    project_expectations: str = ""
    # informational, not scored
    min_experience_months: int = Field(default=0, ge=0)
    preferred_sections: List[str] = Field(default_factory=list)

    @validator('company_id', 'company_name', 'role')
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError('must be a non-empty string')
        return v


class SectionScore(BaseModel):
    name: str
    score: int
    max_score: int
    details: str = ""


class ATSScoreResult(BaseModel):
    total_score: int
    section_scores: List[SectionScore]
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    matched_keywords: List[str] = Field(default_factory=list)
    missing_keywords: List[str] = Field(default_factory=list)

    def section(self, name: str) -> SectionScore:
        for s in self.section_scores:
            if s.name == name:
                return s
        raise KeyError(name)

    def to_record(self) -> Dict[str, Any]:
        """Shape stored alongside an analysis (section order is fixed)."""
        return {
            "ats_score": self.total_score,
            "section_scores": [s.dict() for s in self.section_scores],
            "matched_skills": list(self.matched_skills),
            "missing_skills": list(self.missing_skills),
            "matched_keywords": list(self.matched_keywords),
            "missing_keywords": list(self.missing_keywords),
        }


class StudentContext(BaseModel):
    name: str = "Student"
    year: Optional[int] = None
    program: Optional[str] = None
    gpa: Optional[float] = None
    technical_skills: List[str] = Field(default_factory=list)
    college: Optional[str] = None


# -------- AI feedback --------
class RejectionReason(BaseModel):
    reason: str
    severity: Literal["critical", "major", "minor"] = "major"
    fix: str = ""


class SkillGap(BaseModel):
    skill: str
    importance: Literal["must-have", "good-to-have", "bonus"] = "must-have"
    current_level: Literal["missing", "basic", "intermediate"] = "missing"
    recommendation: str = ""


class ImprovementStep(BaseModel):
    priority: int
    area: str
    action: str
    expected_impact: str = ""
    time_estimate: str = ""


class BulletSuggestion(BaseModel):
    original: str
    improved: str
    reason: str = ""


class FeedbackResult(BaseModel):
    rejection_reasons: List[RejectionReason] = Field(default_factory=list)
    skill_gap_analysis: List[SkillGap] = Field(default_factory=list)
    improvement_steps: List[ImprovementStep] = Field(default_factory=list)
    bullet_suggestions: List[BulletSuggestion] = Field(default_factory=list)
    overall_verdict: str = ""
    source: Literal["llm", "fallback"] = "fallback"
