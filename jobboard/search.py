from typing import Any, Dict, List


def matches_title(job: Dict[str, Any], query: str) -> bool:
    """Case-insensitive substring match on the title only."""
    return query.lower() in (job.get("title") or "").lower()


def filter_jobs(jobs: List[Dict[str, Any]], query: str) -> List[Dict[str, Any]]:
    """
    Filter an already-fetched job list the way the browse page does.
    An empty query keeps every job; order is preserved.
    """
    if not query:
        return list(jobs)
    return [job for job in jobs if matches_title(job, query)]
