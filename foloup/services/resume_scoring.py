"""Keyword-based resume profiling and scoring against job requirements.

Used when the LLM analysis cannot be parsed, and to pre-fill resume profiles.
"""

import re
from dataclasses import dataclass, field

COMMON_SKILLS = [
    "JavaScript", "TypeScript", "Python", "Java", "React", "Node.js", "Angular",
    "Vue.js", "SQL", "MongoDB", "PostgreSQL", "AWS", "Docker", "Kubernetes",
    "Git", "Agile", "Scrum", "Machine Learning", "AI", "Data Analysis",
    "Project Management", "Leadership", "Communication", "Problem Solving",
]

SOFT_SKILLS = [
    "Communication", "Leadership", "Teamwork", "Problem Solving",
    "Critical Thinking", "Adaptability", "Time Management", "Creativity",
    "Collaboration", "Interpersonal Skills",
]

EDUCATION_KEYWORDS = [
    "Bachelor", "Master", "PhD", "MBA", "BSc", "MSc", "Computer Science",
    "Engineering", "Business", "Mathematics",
]

CERTIFICATION_KEYWORDS = [
    "AWS", "Azure", "Google Cloud", "PMP", "Scrum Master", "CISSP", "CompTIA",
    "Microsoft", "Oracle", "Cisco",
]

LANGUAGE_KEYWORDS = [
    "English", "Spanish", "French", "German", "Chinese", "Japanese", "Korean",
    "Arabic", "Russian", "Portuguese", "Italian",
]

EXPERIENCE_PATTERNS = [
    re.compile(r"(\d+)\+?\s*years?\s*of\s*experience", re.IGNORECASE),
    re.compile(r"experience:\s*(\d+)\+?\s*years?", re.IGNORECASE),
    re.compile(r"(\d+)\+?\s*years?\s*in\s*the\s*field", re.IGNORECASE),
]


@dataclass
class ResumeProfile:
    skills: list[str] = field(default_factory=list)
    soft_skills: list[str] = field(default_factory=list)
    education: list[str] = field(default_factory=list)
    certifications: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    experience_years: int = 0


@dataclass
class JobRequirements:
    required_skills: list[str] = field(default_factory=list)
    preferred_skills: list[str] = field(default_factory=list)
    experience_required: int = 0
    education_required: list[str] = field(default_factory=list)


@dataclass
class ResumeScore:
    overall_score: int
    skills_match: int
    experience_match: int
    education_match: int
    technical_skills: list[str]
    soft_skills: list[str]
    experience_summary: str
    education_summary: str
    recommendations: list[str]


def _find_keywords(text: str, keywords: list[str]) -> list[str]:
    lowered = text.lower()
    return [k for k in keywords if k.lower() in lowered]


def _matches(a: str, b: str) -> bool:
    a, b = a.lower(), b.lower()
    return a in b or b in a


def _matched(wanted: list[str], have: list[str]) -> list[str]:
    return [w for w in wanted if any(_matches(w, h) for h in have)]


def extract_experience_years(text: str) -> int:
    for pattern in EXPERIENCE_PATTERNS:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return 0


def extract_profile(text: str) -> ResumeProfile:
    return ResumeProfile(
        skills=_find_keywords(text, COMMON_SKILLS),
        soft_skills=_find_keywords(text, SOFT_SKILLS),
        education=_find_keywords(text, EDUCATION_KEYWORDS),
        certifications=_find_keywords(text, CERTIFICATION_KEYWORDS),
        languages=_find_keywords(text, LANGUAGE_KEYWORDS),
        experience_years=extract_experience_years(text),
    )


def requirements_from_text(text: str) -> JobRequirements:
    """Derive requirements from a free-text job description."""
    return JobRequirements(
        required_skills=_find_keywords(text, COMMON_SKILLS),
        experience_required=extract_experience_years(text),
        education_required=_find_keywords(text, EDUCATION_KEYWORDS),
    )


def skills_match(profile: ResumeProfile, requirements: JobRequirements) -> int:
    score = 0.0
    if requirements.required_skills:
        matched = _matched(requirements.required_skills, profile.skills)
        score += len(matched) / len(requirements.required_skills) * 100
    if requirements.preferred_skills:
        matched = _matched(requirements.preferred_skills, profile.skills)
        score += len(matched) / len(requirements.preferred_skills) * 50
    return min(100, round(score))


def experience_match(profile: ResumeProfile, requirements: JobRequirements) -> int:
    have, need = profile.experience_years, requirements.experience_required
    if need <= 0 or have >= need:
        return 100
    if have >= need * 0.8:
        return 80
    if have >= need * 0.6:
        return 60
    return round(have / need * 100)


def education_match(profile: ResumeProfile, requirements: JobRequirements) -> int:
    if not requirements.education_required:
        return 100
    matched = _matched(requirements.education_required, profile.education)
    return round(len(matched) / len(requirements.education_required) * 100)


def recommendations_for(profile: ResumeProfile, requirements: JobRequirements) -> list[str]:
    recommendations = []

    missing_skills = [
        s for s in requirements.required_skills
        if not any(_matches(s, h) for h in profile.skills)
    ]
    if missing_skills:
        recommendations.append(
            f"Add missing required skills: {', '.join(missing_skills)}")

    if 0 < profile.experience_years < requirements.experience_required:
        recommendations.append(
            f"Highlight relevant experience to meet {requirements.experience_required} years requirement")

    missing_education = [
        e for e in requirements.education_required
        if not any(_matches(e, h) for h in profile.education)
    ]
    if missing_education:
        recommendations.append(
            f"Consider adding education requirements: {', '.join(missing_education)}")

    if not recommendations:
        recommendations = [
            "Resume matches job requirements well",
            "Consider adding quantifiable achievements",
            "Highlight relevant project experience",
        ]
    return recommendations


def score_resume(text: str, requirements: JobRequirements) -> ResumeScore:
    profile = extract_profile(text)

    skills = skills_match(profile, requirements)
    experience = experience_match(profile, requirements)
    education = education_match(profile, requirements)

    if profile.experience_years > 0:
        experience_summary = (
            f"{profile.experience_years}+ years of experience in {', '.join(profile.skills[:3])}")
    else:
        experience_summary = "Experience details available in resume"

    return ResumeScore(
        overall_score=round((skills + experience + education) / 3),
        skills_match=skills,
        experience_match=experience,
        education_match=education,
        technical_skills=profile.skills,
        soft_skills=profile.soft_skills,
        experience_summary=experience_summary,
        education_summary=(
            ", ".join(profile.education)
            if profile.education
            else "Education details available in resume"
        ),
        recommendations=recommendations_for(profile, requirements),
    )
