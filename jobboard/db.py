"""
Data access layer for the jobs and applications tables.

Each table wrapper turns typed records into row calls on the remote store
and attaches owner permissions when a row is created.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from appwrite.client import Client
from appwrite.id import ID
from appwrite.models.row import Row

from .appwrite import AppwriteClient, owner_permissions
from .config import StoreConfig
from .logger import get_logger

logger = get_logger()

JOBS_TABLE = "jobs"
APPLICATIONS_TABLE = "applications"

ANONYMOUS = "anonymous"


@dataclass
class Job:
    """Job posting row."""

    title: str
    description: str
    contact: str
    created_by: str = ANONYMOUS
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_data(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "contact": self.contact,
            "createdBy": self.created_by,
        }

    @classmethod
    def from_row(cls, row: Row) -> "Job":
        data = row.data
        return cls(
            title=data.get("title", ""),
            description=data.get("description", ""),
            contact=data.get("contact", ""),
            created_by=data.get("createdBy", ANONYMOUS),
            id=row.id or None,
            created_at=row.createdat or None,
            updated_at=row.updatedat or None,
        )


@dataclass
class Application:
    """Application to a job. job_id is not checked against the jobs table."""

    job_id: str
    applicant_name: str
    applicant_contact: str
    message: Optional[str] = None
    created_by: str = ANONYMOUS
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_data(self) -> Dict[str, Any]:
        return {
            "jobId": self.job_id,
            "applicantName": self.applicant_name,
            "applicantContact": self.applicant_contact,
            "message": self.message,
            "createdBy": self.created_by,
        }

    @classmethod
    def from_row(cls, row: Row) -> "Application":
        data = row.data
        return cls(
            job_id=data.get("jobId", ""),
            applicant_name=data.get("applicantName", ""),
            applicant_contact=data.get("applicantContact", ""),
            message=data.get("message"),
            created_by=data.get("createdBy", ANONYMOUS),
            id=row.id or None,
            created_at=row.createdat or None,
            updated_at=row.updatedat or None,
        )


# Python attribute -> store column, where they differ.
_COLUMN_NAMES = {
    "created_by": "createdBy",
    "job_id": "jobId",
    "applicant_name": "applicantName",
    "applicant_contact": "applicantContact",
}
_SYSTEM_FIELDS = {"id", "created_at", "updated_at"}

R = TypeVar("R", Job, Application)


@dataclass
class RowList(Generic[R]):
    rows: List[R]
    total: int


class Table(Generic[R]):
    """
    Typed wrapper around one remote table.

    Args:
        client: Store client
        table_id: Remote table name
        record_type: Job or Application
        permissions_for: Builds the permission list granted on create
    """

    def __init__(
        self,
        client: AppwriteClient,
        table_id: str,
        record_type: Type[R],
        permissions_for: Callable[[str], List[str]] = owner_permissions,
    ):
        self.client = client
        self.table_id = table_id
        self.record_type = record_type
        self.permissions_for = permissions_for

    def create(self, entity: R, row_id: Optional[str] = None) -> R:
        """
        Insert a row owned by entity.created_by.

        Args:
            entity: Record to store; system fields are ignored
            row_id: Explicit row id (default: a fresh unique id)

        Returns:
            The stored record with id and timestamps assigned by the store
        """
        row = self.client.create_row(
            self.table_id,
            row_id or ID.unique(),
            entity.to_data(),
            permissions=self.permissions_for(entity.created_by),
        )
        created = self.record_type.from_row(row)
        logger.record_row_created(self.table_id)
        logger.info("Row created", table=self.table_id, id=created.id, created_by=created.created_by)
        return created

    def get(self, row_id: str) -> R:
        """Fetch one row. Raises NotFoundError if it does not exist."""
        return self.record_type.from_row(self.client.get_row(self.table_id, row_id))

    def list(self, queries: Optional[List[str]] = None) -> RowList[R]:
        result = self.client.list_rows(self.table_id, queries)
        rows = [self.record_type.from_row(r) for r in result.rows]
        return RowList(rows=rows, total=int(result.total))

    def update(self, row_id: str, data: Dict[str, Any], permissions: Optional[List[str]] = None) -> R:
        """
        Partially update a row. No server function calls this yet.

        Args:
            row_id: Row to change
            data: Attribute names (python or column form) to new values
            permissions: Replacement permission list, if any
        """
        columns = {}
        for key, value in data.items():
            if key in _SYSTEM_FIELDS or key.startswith("$"):
                raise ValueError(f"System field cannot be updated: {key}")
            columns[_COLUMN_NAMES.get(key, key)] = value
        row = self.client.update_row(self.table_id, row_id, columns, permissions=permissions)
        return self.record_type.from_row(row)

    def delete(self, row_id: str) -> None:
        """Delete a row. No server function calls this yet."""
        self.client.delete_row(self.table_id, row_id)


class Database:
    """Both tables bound to one store client."""

    def __init__(self, client: AppwriteClient):
        self.client = client
        self.jobs: Table[Job] = Table(client, JOBS_TABLE, Job)
        self.applications: Table[Application] = Table(client, APPLICATIONS_TABLE, Application)


def connect(config: StoreConfig, client: Optional[Client] = None) -> Database:
    """
    Build a Database for the given settings.

    Args:
        config: Connection settings (see StoreConfig.from_env)
        client: Optional pre-built SDK client

    Returns:
        Database with jobs and applications tables
    """
    return Database(AppwriteClient(config, client=client))
