"""
Local filtering of job postings and keyword normalization.
"""
from typing import Iterable, List, Optional


def parse_keywords(text: Optional[str]) -> List[str]:
    """
    Split free-text keywords on commas.

    Each keyword is trimmed and lowercased; blanks and repeats are dropped,
    first occurrence order is kept.
    """
    keywords: List[str] = []
    for part in (text or "").split(","):
        keyword = part.strip().lower()
        if keyword and keyword not in keywords:
            keywords.append(keyword)
    return keywords


def job_matches(job, term: str) -> bool:
    """Case-insensitive substring match on title, description or any keyword."""
    needle = term.lower()
    if needle in (job.title or "").lower():
        return True
    if needle in (job.description or "").lower():
        return True
    return any(needle in keyword.lower() for keyword in (job.keywords or []))


def filter_jobs(jobs: Iterable, term: Optional[str]) -> list:
    """Return the jobs matching ``term``; an empty term returns everything."""
    jobs = list(jobs)
    if not term:
        return jobs
    return [job for job in jobs if job_matches(job, term)]
