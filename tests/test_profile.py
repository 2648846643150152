import pytest

from hedhuntr.profile import (
    Certification,
    Education,
    Link,
    Profile,
    ProfileError,
    Project,
    WorkHistory,
    assess_quality,
    validate,
)


def _complete_profile(**overrides):
    values = dict(
        name="Example Candidate",
        headline="Backend engineer",
        skills=["Go", "SQLite", "NATS", "React", "TypeScript"],
        preferred_titles=["Backend Engineer"],
        preferred_locations=["Remote"],
        remote_preference="remote",
        min_salary=150000,
        work_history=[
            WorkHistory(
                company="ExampleCo",
                title="Senior Engineer",
                summary="Built backend systems.",
                highlights=["Built Go APIs.", "Improved SQLite performance.", "Shipped NATS workflows."],
            )
        ],
        projects=[Project(name="Job Pipeline", technologies=["Go", "SQLite"])],
        education=[Education(institution="Example University")],
        links=[Link(label="GitHub", url="https://example.com")],
    )
    values.update(overrides)
    return Profile(**values)


def test_validate_requires_name():
    with pytest.raises(ProfileError, match="name is required"):
        validate(Profile(skills=["Go"]))


def test_validate_requires_skills():
    with pytest.raises(ProfileError, match="at least one skill"):
        validate(Profile(name="Example Candidate"))


def test_validate_accepts_complete_profile():
    profile = Profile(
        name="Example Candidate",
        skills=["Go"],
        remote_preference="remote",
        work_history=[WorkHistory(company="ExampleCo", title="Engineer")],
        projects=[Project(name="Project")],
        education=[Education(institution="Example University")],
        certifications=[Certification(name="Certification")],
        links=[Link(label="GitHub", url="https://example.com")],
    )
    assert validate(profile) is None


def test_validate_rejects_negative_salary():
    with pytest.raises(ProfileError, match="min_salary cannot be negative"):
        validate(Profile(name="A", skills=["Go"], min_salary=-1))


def test_validate_rejects_unknown_remote_preference():
    with pytest.raises(ProfileError, match="remote_preference"):
        validate(Profile(name="A", skills=["Go"], remote_preference="Remote"))


def test_validate_reports_indexed_item():
    profile = Profile(
        name="A",
        skills=["Go"],
        links=[Link(label="GitHub", url="https://example.com"), Link(label="Site", url=" ")],
    )
    with pytest.raises(ProfileError, match=r"links\[1\]\.url is required"):
        validate(profile)


def test_assess_quality_scores_complete_profile_ready():
    report = assess_quality(_complete_profile())
    assert report.status == "ready"
    assert report.score == 100


def test_assess_quality_finds_missing_profile_inputs():
    report = assess_quality(Profile(name="Example Candidate", skills=["Go"]))
    assert report.status == "incomplete"
    assert report.score < 65
    assert any(c.id == "work_history" and c.status == "missing" for c in report.checks)


def test_assess_quality_usable_band():
    report = assess_quality(_complete_profile(headline="", min_salary=None, links=[]))
    assert report.score == 80
    assert report.status == "usable"


def test_profile_dict_round_trip():
    profile = _complete_profile(id=3)
    data = profile.to_dict()
    assert data["id"] == 3
    assert data["work_history"][0]["company"] == "ExampleCo"
    assert "location" not in data["work_history"][0]
    assert Profile.from_dict(data) == profile


def test_profile_to_dict_omits_empty_optional_fields():
    data = Profile(name="A", skills=["Go"]).to_dict()
    assert "id" not in data
    assert "headline" not in data
    assert "min_salary" not in data
    assert data["links"] == []