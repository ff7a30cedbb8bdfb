"""
Pytest configuration and shared fixtures.

FakeAppwrite replaces the SDK's Client.call and serves the TablesDB row
endpoints and the account endpoint from memory, raising AppwriteException
the way the real client does.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest
from appwrite.client import Client
from appwrite.exception import AppwriteException

from jobboard.config import StoreConfig
from jobboard.db import connect

ENDPOINT = "https://appwrite.test/v1"


def _error(message: str, code: int, error_type: str) -> AppwriteException:
    body = {"message": message, "type": error_type, "code": code}
    return AppwriteException(message, code, error_type, json.dumps(body))


class FakeAppwrite:
    """In-memory TablesDB. Each created row gets a creation time one second after the last."""

    def __init__(self):
        self.tables: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.requests: List[Dict[str, Any]] = []
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _now(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat(timespec="milliseconds")

    def writes(self, table: Optional[str] = None) -> List[Dict[str, Any]]:
        return [
            r for r in self.requests
            if r["method"] in ("POST", "PATCH", "DELETE") and (table is None or f"/tables/{table}/" in r["path"] + "/")
        ]

    def call(self, client: Client, method: str, path: str, headers: Optional[Dict[str, str]], params: Optional[Dict[str, Any]]):
        method = method.upper()
        sent_headers = {**client.get_headers(), **(headers or {})}
        self.requests.append({
            "method": method, "path": path, "params": dict(params or {}),
            "headers": sent_headers, "project": client.get_config("project"),
        })
        parts = [p for p in path.split("/") if p]
        # ['tablesdb', db, 'tables', table, 'rows', (row_id)]
        if parts == ["account"]:
            return self._account(sent_headers)
        if len(parts) >= 5 and parts[0] == "tablesdb" and parts[2] == "tables" and parts[4] == "rows":
            db_id, table = parts[1], parts[3]
            row_id = parts[5] if len(parts) > 5 else None
            return self._rows(method, db_id, table, row_id, params or {})
        raise _error("Route not found", 404, "general_route_not_found")

    def _account(self, headers):
        account = self.accounts.get(headers.get("x-appwrite-jwt"))
        if account is None:
            raise _error("Invalid token", 401, "user_jwt_invalid")
        return {"prefs": {}, **account}

    def _rows(self, method, db_id, table, row_id, params):
        rows = self.tables.setdefault(table, {})
        if method == "POST" and row_id is None:
            new_id = params["rowId"]
            if new_id in rows:
                raise _error("Row already exists", 409, "row_already_exists")
            now = self._now()
            row = dict(params["data"])
            row.update({
                "$id": new_id,
                "$createdAt": now,
                "$updatedAt": now,
                "$permissions": list(params.get("permissions") or []),
                "$tableId": table,
                "$databaseId": db_id,
            })
            rows[new_id] = row
            return dict(row)
        if method == "GET" and row_id is None:
            return self._list(rows, params.get("queries"))
        if row_id not in rows:
            raise _error("Row not found", 404, "row_not_found")
        if method == "GET":
            return dict(rows[row_id])
        if method == "PATCH":
            rows[row_id].update(params.get("data") or {})
            if params.get("permissions") is not None:
                rows[row_id]["$permissions"] = params["permissions"]
            rows[row_id]["$updatedAt"] = self._now()
            return dict(rows[row_id])
        if method == "DELETE":
            del rows[row_id]
            return {}
        raise _error("Method not allowed", 405, "general_not_allowed")

    def _list(self, rows, queries):
        result = list(rows.values())
        limit, offset = 25, 0
        for raw in queries or []:
            q = json.loads(raw)
            if q["method"] == "orderDesc":
                result.sort(key=lambda r: r[q["attribute"]], reverse=True)
            elif q["method"] == "orderAsc":
                result.sort(key=lambda r: r[q["attribute"]])
            elif q["method"] == "limit":
                limit = q["values"][0]
            elif q["method"] == "offset":
                offset = q["values"][0]
            elif q["method"] == "equal":
                result = [r for r in result if r.get(q["attribute"]) in q["values"]]
        total = len(result)
        return {"total": total, "rows": [dict(r) for r in result[offset:offset + limit]]}


@pytest.fixture
def store_config() -> StoreConfig:
    return StoreConfig(
        endpoint=ENDPOINT,
        project_id="test-project",
        api_key="test-key",
        database_id="jobboard-db",
    )


@pytest.fixture
def fake_store(monkeypatch) -> FakeAppwrite:
    fake = FakeAppwrite()

    def call(client, method, path="", headers=None, params=None, response_type="json"):
        return fake.call(client, method, path, headers, params)

    monkeypatch.setattr(Client, "call", call)
    return fake


@pytest.fixture
def db(store_config, fake_store):
    return connect(store_config)


@pytest.fixture
def valid_job_input() -> Dict[str, Any]:
    return {
        "title": "Build a landing page",
        "description": "Need a 5-page site",
        "contact": "me@x.com",
    }


@pytest.fixture
def valid_application_input() -> Dict[str, Any]:
    return {
        "jobId": "job-123",
        "applicantName": "Sam Rivera",
        "applicantContact": "sam@example.com",
        "message": "I have built several landing pages.",
    }
