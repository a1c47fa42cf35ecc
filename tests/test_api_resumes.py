import pytest

from foloup.services.ai_service import AIServiceError

RESUME_TEXT = (
    "Jane Doe\n"
    "Senior engineer with 6 years of experience in Python, SQL and Docker.\n"
    "Bachelor of Computer Science."
)


async def _upload(client, headers, candidate, filename, content, content_type="text/plain"):
    return await client.post(
        "/api/v1/resumes/upload",
        data={"candidate_id": str(candidate.id), "interview_id": str(candidate.interview_id)},
        files={"file": (filename, content, content_type)},
        headers=headers,
    )


class TestUpload:
    @pytest.mark.asyncio
    async def test_text_resume_is_parsed(
        self, client, auth_headers, candidate, upload_dir
    ) -> None:
        response = await _upload(
            client, auth_headers, candidate, "jane.txt", RESUME_TEXT.encode())

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["parsed_content"] == RESUME_TEXT
        assert body["filename"] == "jane.txt"
        assert body["file_size"] == len(RESUME_TEXT.encode())
        assert body["file_url"].startswith(f"/uploads/resumes/{candidate.id}/")
        assert body["file_url"].endswith(".txt")

        stored = list((upload_dir / "resumes" / str(candidate.id)).iterdir())
        assert len(stored) == 1

    @pytest.mark.asyncio
    async def test_unparseable_word_file_is_marked_failed(
        self, client, auth_headers, candidate
    ) -> None:
        response = await _upload(
            client, auth_headers, candidate, "old.doc", b"\xd0\xcf\x11\xe0",
            "application/msword")

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "failed"
        assert body["parsed_content"] is None
        assert "Unsupported file type" in body["processing_notes"]

    @pytest.mark.asyncio
    async def test_rejects_images(self, client, auth_headers, candidate) -> None:
        response = await _upload(
            client, auth_headers, candidate, "photo.png", b"\x89PNG", "image/png")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_candidate(self, client, auth_headers, candidate) -> None:
        response = await client.post(
            "/api/v1/resumes/upload",
            data={"candidate_id": "999", "interview_id": str(candidate.interview_id)},
            files={"file": ("cv.txt", b"text", "text/plain")},
            headers=auth_headers,
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_by_candidate(self, client, auth_headers, candidate) -> None:
        await _upload(client, auth_headers, candidate, "one.txt", b"first")
        await _upload(client, auth_headers, candidate, "two.txt", b"second")

        listed = await client.get(
            "/api/v1/resumes/", params={"candidate_id": candidate.id}, headers=auth_headers)
        assert sorted(r["filename"] for r in listed.json()) == ["one.txt", "two.txt"]

        none = await client.get(
            "/api/v1/resumes/", params={"candidate_id": candidate.id + 1},
            headers=auth_headers)
        assert none.json() == []


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_ai_analysis_is_stored(
        self, client, auth_headers, fake_ai, candidate
    ) -> None:
        uploaded = await _upload(client, auth_headers, candidate, "jane.txt", RESUME_TEXT.encode())
        resume_id = uploaded.json()["id"]
        fake_ai.handler = lambda request: {
            "overall_score": 88.6,
            "skills_match": 90,
            "experience_match": 120,
            "education_match": 100,
            "technical_skills": ["Python", "SQL"],
            "soft_skills": ["Mentoring"],
            "experience_summary": "Six years of backend work.",
            "education_summary": "BSc Computer Science.",
            "recommendations": ["Ask about Docker in production"],
        }

        response = await client.post(
            f"/api/v1/resumes/{resume_id}/analyze", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["overall_score"] == 89
        assert body["experience_match"] == 100
        assert body["ai_provider"] == "openai"
        assert body["technical_skills"] == ["Python", "SQL"]

        resume = await client.get(f"/api/v1/resumes/{resume_id}", headers=auth_headers)
        assert resume.json()["status"] == "processed"

    @pytest.mark.asyncio
    async def test_unusable_reply_falls_back_to_rules(
        self, client, auth_headers, fake_ai, candidate
    ) -> None:
        uploaded = await _upload(client, auth_headers, candidate, "jane.txt", RESUME_TEXT.encode())
        resume_id = uploaded.json()["id"]
        fake_ai.handler = lambda request: "Sorry, I can't help with that."

        first = await client.post(f"/api/v1/resumes/{resume_id}/analyze", headers=auth_headers)
        second = await client.post(f"/api/v1/resumes/{resume_id}/analyze", headers=auth_headers)

        assert first.status_code == 200
        body = first.json()
        assert 0 < body["overall_score"] <= 100
        assert "Python" in body["technical_skills"]
        assert second.json()["overall_score"] == body["overall_score"]

        analyses = await client.get(
            f"/api/v1/resumes/{resume_id}/analyses", headers=auth_headers)
        assert [a["id"] for a in analyses.json()] == [second.json()["id"], body["id"]]

    @pytest.mark.asyncio
    async def test_requires_parsed_content(
        self, client, auth_headers, fake_ai, candidate
    ) -> None:
        uploaded = await _upload(
            client, auth_headers, candidate, "old.doc", b"\xd0\xcf", "application/msword")

        response = await client.post(
            f"/api/v1/resumes/{uploaded.json()['id']}/analyze", headers=auth_headers)

        assert response.status_code == 400
        assert fake_ai.calls == []

    @pytest.mark.asyncio
    async def test_provider_outage(self, client, auth_headers, fake_ai, candidate) -> None:
        uploaded = await _upload(client, auth_headers, candidate, "jane.txt", RESUME_TEXT.encode())
        fake_ai.handler = lambda request: AIServiceError(
            "overloaded", status_code=503, provider="openai")

        response = await client.post(
            f"/api/v1/resumes/{uploaded.json()['id']}/analyze", headers=auth_headers)

        assert response.status_code == 503
        assert response.json()["detail"]["error"] == "AI service temporarily unavailable"
