import pytest

from conftest import user_prompt
from foloup.models import Response
from foloup.services.ai_service import AIServiceError


def _call(interview, call_id, **fields) -> Response:
    return Response(interview_id=interview.id, call_id=call_id, **fields)


class TestInterviewCrud:
    @pytest.mark.asyncio
    async def test_create_counts_questions(self, client, auth_headers) -> None:
        payload = {
            "name": "Data Engineer",
            "objective": "Screen data engineers",
            "questions": [{"question": "What is a DAG?"}, {"question": "Explain CDC."}],
            "difficulty": "hard",
        }

        response = await client.post("/api/v1/interviews/", json=payload, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["question_count"] == 2
        assert body["organization_id"] == "org_acme"
        assert body["is_active"] is True

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client) -> None:
        response = await client.get("/api/v1/interviews/")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_list_get_update_delete(self, client, auth_headers, interview) -> None:
        listed = await client.get("/api/v1/interviews/", headers=auth_headers)
        assert [i["id"] for i in listed.json()] == [interview.id]

        updated = await client.patch(
            f"/api/v1/interviews/{interview.id}",
            json={"questions": [{"question": "A"}, {"question": "B"}, {"question": "C"}],
                  "is_active": False},
            headers=auth_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["question_count"] == 3
        assert updated.json()["is_active"] is False
        assert updated.json()["name"] == "Backend Engineer"

        deleted = await client.delete(
            f"/api/v1/interviews/{interview.id}", headers=auth_headers)
        assert deleted.status_code == 204

        missing = await client.get(f"/api/v1/interviews/{interview.id}", headers=auth_headers)
        assert missing.status_code == 404


class TestGenerateQuestions:
    payload = {
        "job_title": "Site Reliability Engineer",
        "job_description": "Kubernetes, Terraform and on-call experience.",
        "question_count": 3,
        "difficulty": "easy",
    }

    @pytest.mark.asyncio
    async def test_generates_questions(self, client, auth_headers, fake_ai) -> None:
        fake_ai.handler = lambda request: {
            "questions": [
                {"question": "How do you debug a failing pod?"},
                "Describe an incident you handled.",
                {"question": "  "},
            ],
            "description": "You will discuss reliability work.",
        }

        response = await client.post(
            "/api/v1/interviews/generate-questions", json=self.payload, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert body["questions"][1] == {"question": "Describe an incident you handled."}
        assert body["provider"] == "openai"
        prompt = user_prompt(fake_ai.calls[0][0])
        assert "Site Reliability Engineer" in prompt
        assert "easy" in prompt

    @pytest.mark.asyncio
    async def test_quota_error_is_passed_through(self, client, auth_headers, fake_ai) -> None:
        fake_ai.handler = lambda request: AIServiceError(
            "insufficient_quota", status_code=429, provider="openai")

        response = await client.post(
            "/api/v1/interviews/generate-questions", json=self.payload, headers=auth_headers)

        assert response.status_code == 429
        detail = response.json()["detail"]
        assert detail["error"].startswith("API quota exceeded")
        assert detail["details"] == "insufficient_quota"
        assert detail["provider"] == "openai"

    @pytest.mark.asyncio
    async def test_unmapped_error_is_internal(self, client, auth_headers, fake_ai) -> None:
        fake_ai.handler = lambda request: AIServiceError("boom", status_code=502)

        response = await client.post(
            "/api/v1/interviews/generate-questions", json=self.payload, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "Internal server error"

    @pytest.mark.asyncio
    async def test_empty_question_list(self, client, auth_headers, fake_ai) -> None:
        fake_ai.handler = lambda request: {"questions": [], "description": ""}

        response = await client.post(
            "/api/v1/interviews/generate-questions", json=self.payload, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["detail"] == "No questions were generated"

    @pytest.mark.asyncio
    async def test_question_count_bounds(self, client, auth_headers) -> None:
        response = await client.post(
            "/api/v1/interviews/generate-questions",
            json={**self.payload, "question_count": 0},
            headers=auth_headers,
        )
        assert response.status_code == 422


class TestInsights:
    @pytest.mark.asyncio
    async def test_insights_from_call_summaries(
        self, client, auth_headers, fake_ai, interview, db
    ) -> None:
        db.add_all([
            _call(interview, "call-1", is_ended=True,
                  details={"call_analysis": {"call_summary": "Strong on SQL."}}),
            _call(interview, "call-2", is_ended=True,
                  details={"call_analysis": {"call_summary": "Weak on Docker."}}),
            _call(interview, "call-3", is_ended=True, details={"transcript": "no summary yet"}),
            _call(interview, "call-4", is_ended=True, details={"call_analysis": "pending"}),
            _call(interview, "call-5", is_ended=False,
                  details={"call_analysis": {"call_summary": "Still talking."}}),
        ])
        await db.commit()
        fake_ai.handler = lambda request: {
            "insights": ["Most candidates know SQL", "Docker is a gap"]}

        response = await client.post(
            f"/api/v1/interviews/{interview.id}/insights", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["insights"] == ["Most candidates know SQL", "Docker is a gap"]
        prompt = user_prompt(fake_ai.calls[0][0])
        assert "Strong on SQL." in prompt and "Weak on Docker." in prompt
        assert "Still talking." not in prompt

        stored = await client.get(f"/api/v1/interviews/{interview.id}", headers=auth_headers)
        assert stored.json()["insights"] == ["Most candidates know SQL", "Docker is a gap"]

    @pytest.mark.asyncio
    async def test_no_summaries(self, client, auth_headers, fake_ai, interview) -> None:
        response = await client.post(
            f"/api/v1/interviews/{interview.id}/insights", headers=auth_headers)

        assert response.status_code == 400
        assert fake_ai.calls == []

    @pytest.mark.asyncio
    async def test_unusable_call_analysis_is_skipped(
        self, client, auth_headers, fake_ai, interview, db
    ) -> None:
        db.add_all([
            _call(interview, "call-1", is_ended=True, details={"call_analysis": "pending"}),
            _call(interview, "call-2", is_ended=True,
                  details={"call_analysis": {"call_summary": 42}}),
        ])
        await db.commit()

        response = await client.post(
            f"/api/v1/interviews/{interview.id}/insights", headers=auth_headers)

        assert response.status_code == 400
        assert fake_ai.calls == []

    @pytest.mark.asyncio
    async def test_malformed_reply(self, client, auth_headers, fake_ai, interview, db) -> None:
        db.add(_call(interview, "call-1", is_ended=True,
                     details={"call_analysis": {"call_summary": "Fine."}}))
        await db.commit()
        fake_ai.handler = lambda request: {"summary": "not a list"}

        response = await client.post(
            f"/api/v1/interviews/{interview.id}/insights", headers=auth_headers)

        assert response.status_code == 500


@pytest.mark.asyncio
async def test_interview_stats(client, auth_headers, interview, db) -> None:
    db.add_all([
        _call(interview, "call-1", is_ended=True, duration=300,
              analytics={"overall_score": 80}, is_analysed=True),
        _call(interview, "call-2", is_ended=True, duration=500,
              analytics={"overall_score": 60}, is_analysed=True),
        _call(interview, "call-3", is_ended=False),
        _call(interview, "call-4", is_ended=False, analytics={"overall_score": "n/a"}),
    ])
    await db.commit()

    response = await client.get(
        f"/api/v1/interviews/{interview.id}/analytics", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "interview_id": interview.id,
        "total_responses": 4,
        "completed_responses": 2,
        "analysed_responses": 2,
        "completion_rate": 0.5,
        "average_score": 70.0,
        "average_duration": 400,
    }


@pytest.mark.asyncio
async def test_stats_without_responses(client, auth_headers, interview) -> None:
    response = await client.get(
        f"/api/v1/interviews/{interview.id}/analytics", headers=auth_headers)

    assert response.json()["total_responses"] == 0
    assert response.json()["average_score"] is None
