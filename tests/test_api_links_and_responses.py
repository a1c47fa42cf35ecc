from datetime import datetime, timedelta, timezone

import pytest

from conftest import user_prompt
from foloup.models import Response


async def _create_link(client, headers, candidate, **extra) -> dict:
    response = await client.post(
        "/api/v1/candidate-links/",
        json={"candidate_id": candidate.id, "interview_id": candidate.interview_id, **extra},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


async def _complete_link(client, headers, candidate, call_id="call-done") -> tuple[dict, dict]:
    link = await _create_link(client, headers, candidate)
    submitted = await client.post(
        f"/api/v1/public/interview/{link['unique_link_id']}/responses",
        json={"call_id": call_id, "details": {"transcript": "Hello"}, "is_ended": True},
    )
    assert submitted.status_code == 201
    return link, submitted.json()


class TestCandidateLinks:
    @pytest.mark.asyncio
    async def test_create_and_list(self, client, auth_headers, candidate) -> None:
        link = await _create_link(client, auth_headers, candidate, notes="first round")

        assert link["status"] == "active"
        assert len(link["unique_link_id"]) == 16
        assert link["link_url"].endswith(f"/interview/{link['unique_link_id']}")
        assert link["notes"] == "first round"

        by_candidate = await client.get(
            "/api/v1/candidate-links/", params={"candidate_id": candidate.id},
            headers=auth_headers)
        by_interview = await client.get(
            "/api/v1/candidate-links/", params={"interview_id": candidate.interview_id},
            headers=auth_headers)
        assert [item["id"] for item in by_candidate.json()] == [link["id"]]
        assert [item["id"] for item in by_interview.json()] == [link["id"]]

    @pytest.mark.asyncio
    async def test_list_needs_a_filter(self, client, auth_headers) -> None:
        response = await client.get("/api/v1/candidate-links/", headers=auth_headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_expire_and_delete(self, client, auth_headers, candidate) -> None:
        past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
        stale = await _create_link(client, auth_headers, candidate, expires_at=past)
        await _create_link(client, auth_headers, candidate)

        expired = await client.post("/api/v1/candidate-links/expire", headers=auth_headers)
        assert expired.json() == {"expired": 1}

        deleted = await client.delete(
            f"/api/v1/candidate-links/{stale['id']}", headers=auth_headers)
        assert deleted.status_code == 204

        again = await client.delete(
            f"/api/v1/candidate-links/{stale['id']}", headers=auth_headers)
        assert again.status_code == 404


class TestPublicInterview:
    @pytest.mark.asyncio
    async def test_full_candidate_flow(
        self, client, auth_headers, candidate, interview
    ) -> None:
        link = await _create_link(client, auth_headers, candidate)
        url = f"/api/v1/public/interview/{link['unique_link_id']}"

        opened = await client.get(url)
        assert opened.status_code == 200
        body = opened.json()
        assert body["candidate_name"] == "Jane Doe"
        assert body["interview"]["name"] == "Backend Engineer"
        assert body["interview"]["question_count"] == 1

        submitted = await client.post(
            f"{url}/responses",
            json={"call_id": "call-abc", "details": {"transcript": "Hello"},
                  "is_ended": True, "duration": 420},
        )
        assert submitted.status_code == 201
        assert submitted.json()["email"] == "jane.doe@example.com"
        assert submitted.json()["candidate_link_id"] == link["id"]

        links = await client.get(
            "/api/v1/candidate-links/", params={"candidate_id": candidate.id},
            headers=auth_headers)
        stored = links.json()[0]
        assert stored["status"] == "completed"
        assert stored["response_id"] == submitted.json()["id"]
        assert stored["completed_at"] is not None

        reopened = await client.get(url)
        assert reopened.status_code == 409
        assert reopened.json()["detail"]["reason"] == "completed"

    @pytest.mark.asyncio
    async def test_unknown_link(self, client) -> None:
        response = await client.get("/api/v1/public/interview/doesnotexist1234")
        assert response.status_code == 404
        assert response.json()["detail"]["reason"] == "invalid"

    @pytest.mark.asyncio
    async def test_expired_link(self, client, auth_headers, candidate) -> None:
        past = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()
        link = await _create_link(client, auth_headers, candidate, expires_at=past)

        response = await client.get(f"/api/v1/public/interview/{link['unique_link_id']}")
        assert response.status_code == 410

    @pytest.mark.asyncio
    async def test_inactive_interview(self, client, auth_headers, candidate, interview) -> None:
        link = await _create_link(client, auth_headers, candidate)
        await client.patch(
            f"/api/v1/interviews/{interview.id}", json={"is_active": False},
            headers=auth_headers)

        response = await client.get(f"/api/v1/public/interview/{link['unique_link_id']}")
        assert response.status_code == 403
        assert response.json()["detail"]["reason"] == "inactive"

    @pytest.mark.asyncio
    async def test_duplicate_call_id(
        self, client, auth_headers, candidate, interview, db
    ) -> None:
        db.add(Response(interview_id=interview.id, call_id="call-taken"))
        await db.commit()
        link = await _create_link(client, auth_headers, candidate)

        response = await client.post(
            f"/api/v1/public/interview/{link['unique_link_id']}/responses",
            json={"call_id": "call-taken"},
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_delete_response_of_completed_link(
        self, client, auth_headers, candidate
    ) -> None:
        link, submitted = await _complete_link(client, auth_headers, candidate)

        deleted = await client.delete(
            f"/api/v1/responses/{submitted['call_id']}", headers=auth_headers)
        assert deleted.status_code == 204

        links = await client.get(
            "/api/v1/candidate-links/", params={"candidate_id": candidate.id},
            headers=auth_headers)
        stored = links.json()[0]
        assert stored["id"] == link["id"]
        assert stored["status"] == "completed"
        assert stored["response_id"] is None

    @pytest.mark.asyncio
    async def test_delete_interview_after_completed_link(
        self, client, auth_headers, candidate, interview
    ) -> None:
        await _complete_link(client, auth_headers, candidate)

        deleted = await client.delete(
            f"/api/v1/interviews/{interview.id}", headers=auth_headers)
        assert deleted.status_code == 204

        missing = await client.get(f"/api/v1/candidates/{candidate.id}", headers=auth_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_other_interview_removes_its_links(
        self, client, auth_headers, candidate
    ) -> None:
        created = await client.post(
            "/api/v1/interviews/",
            json={"name": "Platform Engineer", "questions": [{"question": "Why Go?"}]},
            headers=auth_headers,
        )
        other_id = created.json()["id"]
        response = await client.post(
            "/api/v1/candidate-links/",
            json={"candidate_id": candidate.id, "interview_id": other_id},
            headers=auth_headers,
        )
        link = response.json()
        submitted = await client.post(
            f"/api/v1/public/interview/{link['unique_link_id']}/responses",
            json={"call_id": "call-other"},
        )
        assert submitted.status_code == 201

        deleted = await client.delete(f"/api/v1/interviews/{other_id}", headers=auth_headers)
        assert deleted.status_code == 204

        links = await client.get(
            "/api/v1/candidate-links/", params={"candidate_id": candidate.id},
            headers=auth_headers)
        assert links.json() == []


class TestResponses:
    @pytest.fixture
    def analytics_reply(self):
        return {
            "overall_score": 78,
            "overall_feedback": "Clear answers with good examples.",
            "communication": {"score": 8, "feedback": "Articulate."},
            "soft_skill_summary": "Calm and structured.",
            "question_summaries": [],
        }

    @pytest.mark.asyncio
    async def test_analytics_are_generated_once(
        self, client, auth_headers, fake_ai, interview, db, analytics_reply
    ) -> None:
        db.add(Response(interview_id=interview.id, call_id="call-1",
                        details={"transcript": "Agent: Hi\nUser: Hello"}))
        await db.commit()
        fake_ai.handler = lambda request: analytics_reply

        first = await client.post("/api/v1/responses/call-1/analytics", headers=auth_headers)
        second = await client.post("/api/v1/responses/call-1/analytics", headers=auth_headers)

        assert first.status_code == 200
        analytics = first.json()["analytics"]
        assert analytics["overall_score"] == 78
        assert analytics["main_interview_questions"] == ["Tell me about a system you designed."]
        assert second.json()["analytics"] == analytics
        assert len(fake_ai.calls) == 1
        assert "Agent: Hi" in user_prompt(fake_ai.calls[0][0])

        stored = await client.get("/api/v1/responses/call-1", headers=auth_headers)
        assert stored.json()["is_analysed"] is True

    @pytest.mark.asyncio
    async def test_transcript_in_request_is_used(
        self, client, auth_headers, fake_ai, interview, db, analytics_reply
    ) -> None:
        db.add(Response(interview_id=interview.id, call_id="call-2"))
        await db.commit()
        fake_ai.handler = lambda request: analytics_reply

        response = await client.post(
            "/api/v1/responses/call-2/analytics",
            json={"transcript": "User: I built a queue"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert "I built a queue" in user_prompt(fake_ai.calls[0][0])

    @pytest.mark.asyncio
    async def test_analytics_without_transcript(
        self, client, auth_headers, fake_ai, interview, db
    ) -> None:
        db.add(Response(interview_id=interview.id, call_id="call-3"))
        await db.commit()

        response = await client.post("/api/v1/responses/call-3/analytics", headers=auth_headers)
        assert response.status_code == 400
        assert fake_ai.calls == []

    @pytest.mark.asyncio
    async def test_list_update_count_delete(
        self, client, auth_headers, interview, db
    ) -> None:
        db.add_all([
            Response(interview_id=interview.id, call_id="call-a"),
            Response(interview_id=interview.id, call_id="call-b"),
        ])
        await db.commit()

        listed = await client.get(
            "/api/v1/responses/", params={"interview_id": interview.id}, headers=auth_headers)
        assert {r["call_id"] for r in listed.json()} == {"call-a", "call-b"}

        updated = await client.patch(
            "/api/v1/responses/call-a", json={"is_ended": True, "duration": 95},
            headers=auth_headers)
        assert updated.json()["is_ended"] is True
        assert updated.json()["duration"] == 95

        count = await client.get("/api/v1/responses/count", headers=auth_headers)
        assert count.json() == {"organization_id": "org_acme", "count": 2}

        deleted = await client.delete("/api/v1/responses/call-b", headers=auth_headers)
        assert deleted.status_code == 204
        missing = await client.get("/api/v1/responses/call-b", headers=auth_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_communication_analysis(self, client, auth_headers, fake_ai) -> None:
        empty = await client.post(
            "/api/v1/responses/analyze-communication", json={}, headers=auth_headers)
        assert empty.status_code == 400

        fake_ai.handler = lambda request: {"communicationScore": 7, "overallFeedback": "Good."}
        response = await client.post(
            "/api/v1/responses/analyze-communication",
            json={"transcript": "User: um, so, yes"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json() == {
            "analysis": {"communicationScore": 7, "overallFeedback": "Good."},
            "provider": "openai",
        }


@pytest.mark.asyncio
async def test_organization_analytics(client, auth_headers, interview, candidate, db) -> None:
    db.add(Response(interview_id=interview.id, call_id="call-1"))
    await db.commit()

    response = await client.get("/api/v1/analytics/organization", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "organization_id": "org_acme",
        "total_interviews": 1,
        "active_interviews": 1,
        "total_responses": 1,
        "total_candidates": 1,
        "average_ats_score": 82.0,
    }
