"""Service for generating interview questions from a job description."""

import logging
from typing import Literal, Optional
from pydantic import BaseModel, Field

from foloup.services.ai_service import AICompletionRequest, AIMessage, AIService
from foloup.services.prompts import QUESTIONS_SYSTEM_PROMPT, generate_questions_prompt

logger = logging.getLogger(__name__)

Difficulty = Literal["easy", "medium", "hard"]


class InterviewQuestion(BaseModel):
    question: str


class InterviewQuestionSet(BaseModel):
    """Schema for generated questions and the candidate-facing description."""

    questions: list[InterviewQuestion] = Field(
        ..., description="Generated interview questions")
    description: str = Field("", description="Second-person description of the interview")


class QuestionGenerator:
    """Service for generating interview questions through the AI service."""

    def __init__(self, ai_service: AIService):
        self.ai_service = ai_service

    async def generate_questions(
        self,
        job_title: str,
        job_description: str,
        question_count: int = 10,
        difficulty: Difficulty = "medium",
        provider: Optional[str] = None,
    ) -> InterviewQuestionSet:
        """Generate interview questions for a position."""
        prompt = generate_questions_prompt(
            name=job_title,
            objective=(
                f"Generate {question_count} {difficulty} level interview questions "
                f"for a {job_title} position"
            ),
            number=question_count,
            context=(
                f"Job Title: {job_title}\nJob Description: {job_description}\n"
                f"Difficulty Level: {difficulty}"
            ),
        )

        data = await self.ai_service.complete_json(
            AICompletionRequest(
                model="gpt-4.1",
                messages=[
                    AIMessage(role="system", content=QUESTIONS_SYSTEM_PROMPT),
                    AIMessage(role="user", content=prompt),
                ],
                response_format="json_object",
            ),
            provider,
        )

        if not isinstance(data, dict) or not isinstance(data.get("questions"), list):
            raise ValueError("Invalid response format from AI service")

        questions = []
        for item in data["questions"]:
            # Providers sometimes return bare strings instead of objects
            text = item.get("question") if isinstance(item, dict) else item
            if isinstance(text, str) and text.strip():
                questions.append(InterviewQuestion(question=text.strip()))

        logger.info(f"Generated {len(questions)} questions for {job_title!r}")
        return InterviewQuestionSet(
            questions=questions, description=str(data.get("description") or ""))
