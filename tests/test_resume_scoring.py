from foloup.services.resume_scoring import (
    JobRequirements,
    ResumeProfile,
    education_match,
    experience_match,
    extract_experience_years,
    extract_profile,
    requirements_from_text,
    score_resume,
    skills_match,
)


class TestExperienceYears:
    def test_years_of_experience(self) -> None:
        assert extract_experience_years("Over 7+ years of experience building APIs") == 7

    def test_experience_colon(self) -> None:
        assert extract_experience_years("Experience: 4 years") == 4

    def test_years_in_the_field(self) -> None:
        assert extract_experience_years("3 years in the field of data") == 3

    def test_defaults_to_zero(self) -> None:
        assert extract_experience_years("Recent graduate") == 0


class TestMatchScores:
    def test_skills_required_and_preferred(self) -> None:
        profile = ResumeProfile(skills=["Python", "SQL"])
        requirements = JobRequirements(
            required_skills=["Python", "SQL", "Docker", "Git"],
            preferred_skills=["Kubernetes", "SQL"],
        )
        # 2/4 required * 100 + 1/2 preferred * 50
        assert skills_match(profile, requirements) == 75

    def test_skills_capped_at_100(self) -> None:
        profile = ResumeProfile(skills=["Python"])
        requirements = JobRequirements(required_skills=["Python"], preferred_skills=["Python"])
        assert skills_match(profile, requirements) == 100

    def test_experience_thresholds(self) -> None:
        requirements = JobRequirements(experience_required=10)
        assert experience_match(ResumeProfile(experience_years=12), requirements) == 100
        assert experience_match(ResumeProfile(experience_years=8), requirements) == 80
        assert experience_match(ResumeProfile(experience_years=6), requirements) == 60
        assert experience_match(ResumeProfile(experience_years=3), requirements) == 30

    def test_no_experience_requirement(self) -> None:
        assert experience_match(ResumeProfile(), JobRequirements()) == 100

    def test_education(self) -> None:
        profile = ResumeProfile(education=["Bachelor"])
        assert education_match(profile, JobRequirements()) == 100
        assert education_match(
            profile, JobRequirements(education_required=["Bachelor", "Master"])) == 50


class TestScoreResume:
    def test_profile_keywords(self) -> None:
        profile = extract_profile(
            "Senior engineer, Python and Docker, strong Leadership. "
            "MSc in Computer Science. Fluent in English and French."
        )
        assert "Python" in profile.skills
        assert "Docker" in profile.skills
        assert "Leadership" in profile.soft_skills
        assert "MSc" in profile.education
        assert profile.languages == ["English", "French"]

    def test_score_against_text_requirements(self) -> None:
        requirements = requirements_from_text(
            "Looking for Python and Docker, 5 years of experience, Bachelor degree")
        score = score_resume(
            "Python developer with 5 years of experience. Bachelor of Engineering.",
            requirements,
        )

        assert score.skills_match == 50
        assert score.experience_match == 100
        assert score.education_match == 100
        assert score.overall_score == round((50 + 100 + 100) / 3)
        assert score.recommendations == ["Add missing required skills: Docker"]
        assert score.experience_summary.startswith("5+ years of experience")

    def test_generic_advice_when_everything_matches(self) -> None:
        score = score_resume("Python", JobRequirements(required_skills=["Python"]))
        assert score.recommendations[0] == "Resume matches job requirements well"
