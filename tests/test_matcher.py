from hedhuntr.matcher import CandidateProfile, Job, score


def test_score_matches_skills_and_preferences():
    result = score(
        CandidateProfile(
            skills=["Go", "NATS", "SQLite", "React"],
            preferred_titles=["backend engineer"],
            preferred_locations=["remote"],
            remote_preference="remote",
            min_salary=120000,
        ),
        Job(
            title="Senior Backend Engineer",
            location="Remote",
            skills=["Go", "NATS", "SQLite", "Docker"],
            salary_min=140000,
            salary_max=180000,
            remote_policy="remote",
        ),
    )
    assert result.score >= 80
    assert "Go" in result.matched_skills
    assert "Docker" in result.missing_skills


def test_no_job_skills_gives_neutral_score():
    result = score(CandidateProfile(), Job())
    assert result.score == 35
    assert result.notes == ["No parsed job skills were available; skill score is neutral."]
    assert result.matched_skills == []
    assert result.missing_skills == []


def test_full_skill_match_scores_55():
    result = score(CandidateProfile(skills=["go"]), Job(skills=["Go"]))
    assert result.score == 55
    assert result.matched_skills == ["go"]
    assert result.notes == []


def test_skills_deduplicated_and_sorted():
    result = score(
        CandidateProfile(skills=["Python", "go"]),
        Job(skills=["Go", "go", " ", "Rust", "python", "Docker"]),
    )
    assert result.matched_skills == ["Python", "go"]
    assert result.missing_skills == ["Docker", "Rust"]


def test_remote_preference_accepts_hybrid():
    result = score(CandidateProfile(remote_preference="remote"), Job(remote_policy="Hybrid"))
    assert "Remote policy matches candidate preference." in result.notes
    onsite = score(CandidateProfile(remote_preference="onsite"), Job(remote_policy="hybrid"))
    assert "Remote policy matches candidate preference." not in onsite.notes


def test_salary_compatibility_rules():
    below = score(CandidateProfile(min_salary=150000), Job(salary_min=160000, salary_max=140000))
    assert "Salary range appears compatible." not in below.notes
    only_min = score(CandidateProfile(min_salary=150000), Job(salary_min=150000))
    assert "Salary range appears compatible." in only_min.notes
    no_floor = score(CandidateProfile(), Job(salary_max=200000))
    assert "Salary range appears compatible." not in no_floor.notes


def test_title_and_location_matching():
    result = score(
        CandidateProfile(preferred_titles=["", "platform"], preferred_locations=["", "berlin"]),
        Job(title="Platform Engineer", location="Berlin, Germany"),
    )
    assert result.score == 35 + 15 + 10
    miss = score(CandidateProfile(preferred_titles=[""], preferred_locations=[""]), Job(title="X", location="Y"))
    assert miss.score == 35