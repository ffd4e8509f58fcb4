"""
Static vocabulary used by the ATS scoring engine.

Phrases are written in human form; the term matcher normalizes synonym
variants before comparing, while header/verb/contact indicators are
compared verbatim against already-normalized resume text.
"""
import re
from types import MappingProxyType

# Canonical concept -> phrases that refer to it
SYNONYM_TABLE = MappingProxyType({
    "javascript": ("js", "javascript", "ecmascript"),
    "typescript": ("ts", "typescript"),
    "python": ("python", "py"),
    "nodejs": ("nodejs", "node", "expressjs", "express"),
    "reactjs": ("react", "reactjs", "nextjs"),
    "mongodb": ("mongodb", "mongo"),
    "postgresql": ("postgresql", "postgres", "psql"),
    "mysql": ("mysql", "sql"),
    "cplusplus": ("c++", "cpp", "cplusplus"),
    "csharp": ("c#", "csharp"),
    "machinelearning": ("machine learning", "ml", "deep learning", "dl"),
    "datastructures": ("data structures", "dsa", "algorithms"),
    "systemdesign": ("system design", "hld", "lld", "architecture"),
    "restapis": ("rest api", "restful", "api development"),
    "amazonwebservices": ("aws", "amazon web services"),
    "googlecloudplatform": ("gcp", "google cloud"),
    "microsoftazure": ("azure", "microsoft azure"),
    "objectoriented": ("oop", "object oriented", "oops"),
    "problemsolving": ("problem solving", "competitive programming", "cp"),
    "communication": ("communication", "soft skills", "interpersonal"),
})

# -------- Projects --------
PROJECT_HEADERS = (
    "projects", "project work", "personal projects", "academic projects", "key projects",
)

TECH_STACK_INDICATORS = (
    "built with", "developed using", "tech stack", "technologies used",
    "implemented", "using react", "using python", "using java", "using node",
    "built a", "developed a", "created a", "designed a",
)

QUANTIFIED_OUTCOME_PATTERN = re.compile(
    r"\d+%|\d+x|\d+ users|\d+ requests|\d+k|\d+ transactions|\d+ downloads"
    r"|reduced by|improved by|increased by|scaled to"
)

PROJECT_MENTION_PATTERN = re.compile(r"(?:project|built|developed|created|designed)\s+(?:a\s+)?")

MIN_PROJECT_MENTIONS = 2

# -------- Experience --------
EXPERIENCE_HEADERS = (
    "experience", "work experience", "professional experience",
    "internship", "internships", "employment",
)

# "2022-2024" and "2023-present" lose their hyphen during normalization
DURATION_PATTERN = re.compile(
    r"\b(?:19|20)\d{2}\s*[-–]?\s*(?:(?:19|20)\d{2}\b|present|current|ongoing)"
    r"|(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\w*\s+\d{4}"
    r"|\d+\s*(?:months?|years?)",
    re.IGNORECASE,
)

ACTION_VERBS = (
    "developed", "implemented", "designed", "managed", "led", "optimized",
    "built", "architected", "deployed", "automated", "collaborated", "mentored",
    "analyzed", "integrated", "resolved", "delivered", "spearheaded",
)

STRONG_VERB_COUNT = 3

# -------- Structure --------
EDUCATION_INDICATORS = (
    "education", "bachelor", "master", "b.tech", "b.e.", "btech", "mtech",
    "degree", "university", "college", "cgpa", "gpa", "percentage",
)

SKILLS_SECTION_INDICATORS = (
    "skills", "technical skills", "core competencies", "proficiencies",
    "technologies", "tools", "frameworks",
)

CONTACT_INDICATORS = ("email", "phone", "linkedin", "github", "@", ".com")

FULL_CONTACT_COUNT = 3

STRUCTURE_SECTIONS = (
    "education", "experience", "skills", "projects", "certifications", "achievements",
)

WELL_STRUCTURED_COUNT = 4
BASIC_STRUCTURE_COUNT = 2
