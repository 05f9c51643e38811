"""
Tests for keyword parsing and local job filtering.
"""
from types import SimpleNamespace

from jobquest.services.job_search import filter_jobs, job_matches, parse_keywords


def _job(title="", description="", keywords=None):
    return SimpleNamespace(title=title, description=description, keywords=keywords or [])


def test_parse_keywords_splits_trims_and_lowercases():
    assert parse_keywords(" React, UI ,frontend") == ["react", "ui", "frontend"]


def test_parse_keywords_drops_blanks_and_repeats():
    assert parse_keywords("python,, Python ,  ,django") == ["python", "django"]


def test_parse_keywords_empty():
    assert parse_keywords("") == []
    assert parse_keywords(None) == []


def test_match_on_title_is_case_insensitive():
    assert job_matches(_job(title="Senior ENGINEER"), "engineer")


def test_match_on_description():
    assert job_matches(_job(title="Designer", description="Works with the Product team"), "product")


def test_match_on_keyword_substring():
    """Substring, not whole-word: 'react' matches a 'reactive' keyword."""
    assert job_matches(_job(title="Dev", keywords=["reactive"]), "react")


def test_no_match():
    job = _job(title="Designer", description="Pixels", keywords=["figma"])
    assert not job_matches(job, "engineer")


def test_empty_term_returns_everything():
    jobs = [_job(title="A"), _job(title="B")]
    assert filter_jobs(jobs, "") == jobs
    assert filter_jobs(jobs, None) == jobs


def test_filter_keeps_order():
    jobs = [
        _job(title="Backend Engineer"),
        _job(title="Designer"),
        _job(title="Data Engineer"),
    ]
    assert [j.title for j in filter_jobs(jobs, "engineer")] == ["Backend Engineer", "Data Engineer"]


def test_filter_term_is_not_trimmed():
    """Whitespace in the term is part of the substring."""
    jobs = [_job(title="Engineer")]
    assert filter_jobs(jobs, " engineer") == []


def test_filter_tolerates_missing_fields():
    job = SimpleNamespace(title=None, description=None, keywords=None)
    assert filter_jobs([job], "x") == []
