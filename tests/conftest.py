"""Shared fixtures: in-memory persistence service"""
from datetime import datetime, timedelta, timezone

import pytest

from cipherstudio.exceptions import UnauthenticatedError
from cipherstudio.services.session import SessionContext
from cipherstudio.services.sync_engine import SyncEngine


class FakeRepo:
    """In-memory stand-in for SupabaseRepo with the same coroutine methods"""

    def __init__(self):
        self.projects: dict[str, dict] = {}
        self.files: dict[str, dict] = {}
        self.tokens: dict[str, str] = {}
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _record(self, op: str):
        self.calls.append(op)
        if op in self.fail_on:
            raise RuntimeError(f"{op} failed")

    def _tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    async def upsert_project(self, project_id, owner_id, name, description=None):
        self._record("upsert_project")
        now = self._tick()
        row = self.projects.get(project_id, {"id": project_id, "created_at": now})
        row = {**row, "user_id": owner_id, "name": name, "description": description, "updated_at": now}
        self.projects[project_id] = row
        return dict(row)

    async def delete_files_by_project(self, project_id):
        self._record("delete_files_by_project")
        self.files = {k: v for k, v in self.files.items() if v["project_id"] != project_id}

    async def insert_files(self, records):
        self._record("insert_files")
        for record in records:
            if record["id"] in self.files:
                raise RuntimeError(f"duplicate key {record['id']}")
            self.files[record["id"]] = dict(record)

    async def query_projects_by_owner(self, owner_id):
        self._record("query_projects_by_owner")
        rows = [dict(r) for r in self.projects.values() if r.get("user_id") == owner_id]
        return sorted(rows, key=lambda r: r.get("updated_at") or "", reverse=True)

    async def query_files_by_project(self, project_id):
        self._record("query_files_by_project")
        return [dict(r) for r in self.files.values() if r["project_id"] == project_id]

    async def get_project(self, project_id, owner_id):
        self._record("get_project")
        row = self.projects.get(project_id)
        if row is None or row.get("user_id") != owner_id:
            return None
        return dict(row)

    async def delete_project(self, project_id, owner_id):
        self._record("delete_project")
        row = self.projects.get(project_id)
        if row is not None and row.get("user_id") == owner_id:
            del self.projects[project_id]
            # FK cascade
            self.files = {k: v for k, v in self.files.items() if v["project_id"] != project_id}

    async def get_session(self, access_token):
        user_id = self.tokens.get(access_token)
        if user_id is None:
            raise UnauthenticatedError("Invalid access token")
        return SessionContext(user_id=user_id, access_token=access_token)

    async def sign_out(self, access_token):
        self._record("sign_out")
        self.tokens.pop(access_token, None)


@pytest.fixture
def fake_repo():
    return FakeRepo()


@pytest.fixture
def engine(fake_repo):
    return SyncEngine(fake_repo)


@pytest.fixture
def ctx():
    return SessionContext(user_id="user-1", access_token="token-1")
