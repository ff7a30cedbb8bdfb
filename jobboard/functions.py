"""
Server functions: the request/response entry points of the job board.

Each function takes the Database explicitly, validates its input where it
has any, makes one store call and reshapes the row into a plain dict keyed
the way clients see it (camelCase).
"""

from typing import Any, Dict, Optional

from appwrite.query import Query

from .auth import resolve_actor
from .db import ANONYMOUS, Application, Database, Job
from .errors import ValidationError
from .logger import get_logger
from .schema import parse_application, parse_job, parse_job_lookup

logger = get_logger()

LIST_LIMIT = 100


def job_to_dict(job: Job) -> Dict[str, Any]:
    return {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "contact": job.contact,
        "createdAt": job.created_at,
    }


def application_to_dict(application: Application) -> Dict[str, Any]:
    return {
        "id": application.id,
        "jobId": application.job_id,
        "applicantName": application.applicant_name,
        "applicantContact": application.applicant_contact,
        "message": application.message,
    }


def _owner(db: Database, jwt: Optional[str]) -> str:
    actor = resolve_actor(db.client, jwt)
    return actor.id if actor else ANONYMOUS


def get_job_count(db: Database) -> Dict[str, int]:
    result = db.jobs.list([Query.limit(1)])
    return {"count": result.total}


def list_jobs(db: Database) -> Dict[str, Any]:
    """Newest first, at most LIST_LIMIT rows."""
    result = db.jobs.list([
        Query.order_desc("$createdAt"),
        Query.limit(LIST_LIMIT),
    ])
    return {"jobs": [job_to_dict(j) for j in result.rows[:LIST_LIMIT]]}


def get_job(db: Database, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fetch one job.

    Raises:
        ValidationError: If id is missing or empty
        NotFoundError: If no job has that id
    """
    try:
        job_id = parse_job_lookup(data)
    except ValidationError:
        logger.record_validation_failure("get_job")
        raise
    return {"job": job_to_dict(db.jobs.get(job_id))}


def create_job(db: Database, data: Dict[str, Any], jwt: Optional[str] = None) -> Dict[str, Any]:
    """
    Validate and store a new job posting.

    Args:
        db: Database to write to
        data: {"title", "description", "contact"}
        jwt: Token of the signed-in user; without one the job is owned by "anonymous"

    Returns:
        {"job": {...}} with the store-assigned id and createdAt

    Raises:
        ValidationError: Nothing is written
        AuthenticationError: If the actor lookup fails
    """
    try:
        fields = parse_job(data)
    except ValidationError as e:
        logger.record_validation_failure("create_job")
        logger.warning("Rejected job input", fields=e.fields)
        raise

    job = db.jobs.create(Job(
        title=fields["title"],
        description=fields["description"],
        contact=fields["contact"],
        created_by=_owner(db, jwt),
    ))
    return {"job": job_to_dict(job)}


def create_application(db: Database, data: Dict[str, Any], jwt: Optional[str] = None) -> Dict[str, Any]:
    """
    Validate and store an application. jobId is stored as given; it is not
    checked against the jobs table.
    """
    try:
        fields = parse_application(data)
    except ValidationError as e:
        logger.record_validation_failure("create_application")
        logger.warning("Rejected application input", fields=e.fields)
        raise

    application = db.applications.create(Application(
        job_id=fields["jobId"],
        applicant_name=fields["applicantName"],
        applicant_contact=fields["applicantContact"],
        message=fields["message"],
        created_by=_owner(db, jwt),
    ))
    return {"application": application_to_dict(application)}
