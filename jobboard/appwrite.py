"""
Adapter over the Appwrite SDK for the TablesDB rows and Account calls.

Only the calls the job board needs are wrapped. AppwriteException is
translated into JobBoardError subclasses here so nothing above this module
has to know about the SDK's error type.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from appwrite.client import Client
from appwrite.exception import AppwriteException
from appwrite.models.row import Row
from appwrite.models.row_list import RowList
from appwrite.models.user import User
from appwrite.permission import Permission
from appwrite.role import Role
from appwrite.services.account import Account
from appwrite.services.tables_db import TablesDB

from .config import StoreConfig
from .errors import NotFoundError, RemoteServiceError
from .logger import get_logger

logger = get_logger()


def make_client(config: StoreConfig, jwt: Optional[str] = None) -> Client:
    """
    SDK client for the project. Server calls use the API key; a user JWT
    replaces it when looking up that user's account.
    """
    client = Client().set_endpoint(config.endpoint).set_project(config.project_id)
    if jwt:
        return client.set_jwt(jwt)
    return client.set_key(config.api_key)


def owner_permissions(owner: str) -> List[str]:
    """Full read/write/update/delete grant for one owner identity."""
    role = Role.user(owner)
    return [
        Permission.write(role),
        Permission.read(role),
        Permission.update(role),
        Permission.delete(role),
    ]


class AppwriteClient:
    """
    Row and account calls for one Appwrite project.

    Args:
        config: Connection settings
        client: Optional pre-built SDK client (default: make_client(config))
    """

    def __init__(self, config: StoreConfig, client: Optional[Client] = None):
        self.config = config
        self.client = client if client is not None else make_client(config)
        self.tables = TablesDB(self.client)

    @contextmanager
    def _call(self, action: str, table: str = "-", target: str = "") -> Iterator[None]:
        """
        Count one store call and translate SDK failures.

        Raises:
            NotFoundError: On code 404
            RemoteServiceError: On any other service or transport failure
        """
        logger.record_remote_call(table)
        logger.debug("Store request", action=action, table=table, target=target)
        try:
            yield
        except AppwriteException as e:
            code = e.code or None
            logger.record_remote_failure(table, f"HTTPError_{code}" if code else "RequestException")
            if code == 404:
                logger.warning("Store row not found", table=table, target=target, type=e.type)
                raise NotFoundError(e.message, error_type=e.type) from e
            if code is None:
                # SDK wraps transport errors (refused, timed out) with no status
                logger.error("Store request error", action=action, table=table, error=str(e.message))
                raise RemoteServiceError(f"Store request error: {e.message}") from e
            logger.error("Store request failed", action=action, table=table, status=code, type=e.type)
            raise RemoteServiceError(
                f"Store request failed ({code}): {e.message}",
                status_code=code,
                error_type=e.type,
            ) from e

    # Rows

    def create_row(self, table_id: str, row_id: str, data: Dict[str, Any], permissions: Optional[List[str]] = None) -> Row:
        with self._call("create_row", table_id, row_id):
            return self.tables.create_row(
                database_id=self.config.database_id,
                table_id=table_id,
                row_id=row_id,
                data=data,
                permissions=permissions,
            )

    def get_row(self, table_id: str, row_id: str) -> Row:
        with self._call("get_row", table_id, row_id):
            return self.tables.get_row(
                database_id=self.config.database_id,
                table_id=table_id,
                row_id=row_id,
            )

    def update_row(self, table_id: str, row_id: str, data: Dict[str, Any], permissions: Optional[List[str]] = None) -> Row:
        with self._call("update_row", table_id, row_id):
            return self.tables.update_row(
                database_id=self.config.database_id,
                table_id=table_id,
                row_id=row_id,
                data=data,
                permissions=permissions,
            )

    def delete_row(self, table_id: str, row_id: str) -> None:
        with self._call("delete_row", table_id, row_id):
            self.tables.delete_row(
                database_id=self.config.database_id,
                table_id=table_id,
                row_id=row_id,
            )

    def list_rows(self, table_id: str, queries: Optional[List[str]] = None) -> RowList:
        with self._call("list_rows", table_id):
            return self.tables.list_rows(
                database_id=self.config.database_id,
                table_id=table_id,
                queries=list(queries) if queries else None,
            )

    # Account

    def get_account(self, jwt: str) -> User:
        """Fetch the account a JWT belongs to. Sent without the API key."""
        with self._call("get_account", "account"):
            return Account(make_client(self.config, jwt=jwt)).get()
