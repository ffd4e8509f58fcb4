"""
Role-level defaults for company requirement records.

Keywords are what ATS systems typically scan for each role type; the
project expectation text is advisory and never scored.
"""
import re
from typing import List, Optional

from resume_ats.models.models import CompanyRequirements

ROLE_KEYWORDS = {
    "SDE": [
        "data structures", "algorithms", "system design", "object oriented",
        "REST API", "microservices", "git", "agile", "CI/CD", "testing",
        "scalable", "performance", "debugging", "code review", "clean code",
    ],
    "Analyst": [
        "data analysis", "SQL", "Excel", "visualization", "reporting",
        "business intelligence", "tableau", "power bi", "statistics",
        "problem solving", "stakeholder", "requirements gathering",
    ],
    "Associate Software Engineer": [
        "programming", "data structures", "algorithms", "databases",
        "web development", "problem solving", "teamwork", "agile",
        "testing", "debugging", "version control",
    ],
    "Member Technical Staff": [
        "programming", "data structures", "algorithms", "C",
        "problem solving", "logic", "system design", "debugging",
        "optimization", "clean code",
    ],
    "System Engineer": [
        "programming", "databases", "SQL", "problem solving",
        "communication", "teamwork", "agile", "testing", "debugging",
    ],
    "Systems Engineer": [
        "programming", "databases", "SQL", "problem solving",
        "communication", "teamwork", "agile", "testing",
    ],
    "Project Engineer": [
        "programming", "databases", "SQL", "problem solving",
        "communication", "aptitude", "teamwork",
    ],
    "Programmer Analyst": [
        "programming", "data structures", "databases", "SQL",
        "problem solving", "algorithms", "web development", "agile",
    ],
    "default": [
        "programming", "data structures", "algorithms", "problem solving",
        "communication", "teamwork", "databases", "web development",
    ],
}

ROLE_PROJECT_EXPECTATIONS = {
    "SDE": (
        "Expects 2-3 well-documented projects showcasing system design, scalability, and clean code "
        "practices. Projects should use modern frameworks and include quantified outcomes."
    ),
    "Analyst": (
        "Expects 1-2 data-driven projects demonstrating SQL proficiency, data visualization, "
        "and business insight generation."
    ),
    "default": (
        "Expects at least 2 projects showing practical application of programming skills "
        "with clear descriptions and tech stack details."
    ),
}

DEFAULT_PREFERRED_SECTIONS = ["Education", "Skills", "Projects", "Experience"]

FALLBACK_REQUIRED_SKILLS = ["data structures", "algorithms", "problem solving", "programming"]
FALLBACK_KEYWORDS = ["programming", "data structures", "algorithms", "databases", "web development"]


def keywords_for_role(role: str) -> List[str]:
    return list(ROLE_KEYWORDS.get(role, ROLE_KEYWORDS["default"]))


def project_expectations_for_role(role: str) -> str:
    return ROLE_PROJECT_EXPECTATIONS.get(role, ROLE_PROJECT_EXPECTATIONS["default"])


def custom_company_id(company_name: str) -> str:
    return "custom_" + re.sub(r"[^a-z0-9]", "_", company_name.lower())


def build_role_requirements(
    company_id: str,
    company_name: str,
    role: str,
    required_skills: List[str],
    keywords: Optional[List[str]] = None,
    project_expectations: Optional[str] = None,
    min_experience_months: int = 0,
    preferred_sections: Optional[List[str]] = None,
) -> CompanyRequirements:
    """Fill keywords, project expectations and sections from the role tables where not given."""
    return CompanyRequirements(
        company_id=company_id,
        company_name=company_name,
        role=role,
        required_skills=list(required_skills),
        keywords=keywords_for_role(role) if keywords is None else list(keywords),
        project_expectations=project_expectations or project_expectations_for_role(role),
        min_experience_months=min_experience_months,
        preferred_sections=list(preferred_sections or DEFAULT_PREFERRED_SECTIONS),
    )


def fallback_requirements(company_name: str, role: str) -> CompanyRequirements:
    """Generic requirements used when no record exists for the company."""
    return CompanyRequirements(
        company_id=custom_company_id(company_name),
        company_name=company_name,
        role=role,
        required_skills=list(FALLBACK_REQUIRED_SKILLS),
        keywords=list(FALLBACK_KEYWORDS),
        project_expectations="Strong project work with measurable outcomes",
        min_experience_months=0,
        preferred_sections=list(DEFAULT_PREFERRED_SECTIONS),
    )
