"""Resume-to-job-description matching."""

import logging
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from foloup.services.ai_service import (
    AICompletionRequest,
    AIMessage,
    AIService,
)
from foloup.services.prompts import (
    ATS_SYSTEM_PROMPT,
    ats_match_prompt,
    contact_info_prompt,
)

logger = logging.getLogger(__name__)

NOT_FOUND = "not found"
KEYWORD_WEIGHT_THRESHOLD = 0.1


class ATSMatchResult(BaseModel):
    match_score: int = Field(..., description="Fit of the resume to the JD, 0-100")
    missing_skills: list[str] = Field(default_factory=list)
    feedback: str = ""

    @field_validator("match_score", mode="before")
    @classmethod
    def clamp_score(cls, value):
        return max(0, min(100, round(float(value))))

    @field_validator("missing_skills", mode="before")
    @classmethod
    def drop_empty_skills(cls, value):
        if not value:
            return []
        return [str(s).strip() for s in value if s is not None and str(s).strip()]


class ContactInfo(BaseModel):
    name: str = NOT_FOUND
    email: str = NOT_FOUND
    phone: str = NOT_FOUND

    @field_validator("name", "email", "phone", mode="before")
    @classmethod
    def default_missing(cls, value):
        if value is None or not str(value).strip():
            return NOT_FOUND
        return str(value).strip()

    @property
    def is_found(self) -> bool:
        return self.name != NOT_FOUND and self.email != NOT_FOUND


class KeywordMatch(BaseModel):
    similarity_score: float
    match_percentage: str
    matched_keywords: list[str]


class ATSMatcher:
    """LLM-backed ATS scoring and contact extraction."""

    def __init__(self, ai_service: AIService):
        self.ai_service = ai_service

    async def match_resume_to_jd(
        self, jd_text: str, resume_text: str, provider: Optional[str] = None
    ) -> ATSMatchResult:
        logger.info(
            f"Matching resume ({len(resume_text)} chars) to JD ({len(jd_text)} chars)")
        request = AICompletionRequest(
            model="gpt-4o",
            messages=[
                AIMessage(role="system", content=ATS_SYSTEM_PROMPT),
                AIMessage(role="user", content=ats_match_prompt(resume_text, jd_text)),
            ],
            response_format="json_object",
            temperature=0.2,
        )
        data = await self.ai_service.complete_json(request, provider)
        if not isinstance(data, dict) or "match_score" not in data:
            raise ValueError("ATS response is missing match_score")
        return ATSMatchResult.model_validate(data)

    async def extract_contact_info(
        self, resume_text: str, provider: Optional[str] = None
    ) -> ContactInfo:
        logger.info("Extracting contact information from resume")
        request = AICompletionRequest(
            model="gpt-4o",
            messages=[
                AIMessage(role="system", content=ATS_SYSTEM_PROMPT),
                AIMessage(role="user", content=contact_info_prompt(resume_text)),
            ],
            response_format="json_object",
            temperature=0.0,
        )
        data = await self.ai_service.complete_json(request, provider)
        if not isinstance(data, dict):
            raise ValueError("Contact info response is not a JSON object")
        return ContactInfo.model_validate(data)


def analyze_resume_keywords(resume_text: str, jd_text: str) -> KeywordMatch:
    """Score a resume against a JD without an LLM.

    Similarity is the TF-IDF cosine of the two documents. Matched keywords are
    JD terms whose TF-IDF weight in the JD exceeds the threshold and which
    are also tokens of the resume, so "java" does not match "javascript".
    """
    if not resume_text.strip() or not jd_text.strip():
        return KeywordMatch(similarity_score=0.0, match_percentage="0.00%", matched_keywords=[])

    vectorizer = TfidfVectorizer(stop_words="english")
    try:
        matrix = vectorizer.fit_transform([jd_text, resume_text])
    except ValueError:
        # Only stop words in both documents
        return KeywordMatch(similarity_score=0.0, match_percentage="0.00%", matched_keywords=[])

    similarity = float(cosine_similarity(matrix[0:1], matrix[1:2])[0][0])

    terms = vectorizer.get_feature_names_out()
    jd_weights = matrix[0].toarray()[0]
    resume_weights = matrix[1].toarray()[0]
    ranked = sorted(
        (
            (terms[i], w) for i, w in enumerate(jd_weights)
            if w > KEYWORD_WEIGHT_THRESHOLD and resume_weights[i] > 0
        ),
        key=lambda item: item[1],
        reverse=True,
    )
    matched = [term for term, _ in ranked]

    return KeywordMatch(
        similarity_score=round(similarity, 4),
        match_percentage=f"{similarity * 100:.2f}%",
        matched_keywords=matched,
    )
