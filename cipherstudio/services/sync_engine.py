"""Full-replace synchronization between tree snapshots and Supabase

Saving a project upserts its metadata row, deletes every file record of the
project and inserts the current node collection again. The three steps are
not transactional: if the delete or insert fails the metadata is already
ahead of the files, and saving again converges.
"""

import asyncio
import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from cipherstudio.exceptions import ConsistencyError, ProjectNotFoundError, SyncError
from cipherstudio.models.schemas import FileRecord, Node, Project, ProjectRecord
from cipherstudio.services.session import SessionContext
from cipherstudio.services.supabase.repo import SupabaseRepo
from cipherstudio.services.tree_store import DEFAULT_SEPARATOR, TreeStore

logger = logging.getLogger(__name__)


class SyncEngine:
    """Bridges TreeStore snapshots and the persistence service"""

    def __init__(self, repo: SupabaseRepo, separator: str = DEFAULT_SEPARATOR):
        self.repo = repo
        self.separator = separator

    def tree_of(self, project: Project) -> TreeStore:
        return TreeStore(project.nodes, separator=self.separator)

    # ==================== Save ====================

    async def save(self, ctx: SessionContext, project: Project) -> Project:
        """Persist the project, replacing all of its file records.

        Returns the project with updated_at taken from the saved metadata row.
        """
        owner_id = ctx.require_user()

        # Parents come before children so a parent_id foreign key holds per chunk
        store = self.tree_of(project)
        records = [to_file_record(node, project.id) for _depth, _path, node in store.walk()]

        logger.info(f"Saving project {project.id} ({len(records)} nodes)")
        try:
            row = await self.repo.upsert_project(
                project_id=project.id,
                owner_id=owner_id,
                name=project.name,
                description=project.description,
            )
        except Exception as e:
            logger.error(f"Project upsert failed for {project.id}: {type(e).__name__}: {e}")
            raise SyncError(f"Failed to save project '{project.name}': {e}") from e

        try:
            await self.repo.delete_files_by_project(project.id)
            if records:
                await self.repo.insert_files(records)
        except Exception as e:
            logger.error(
                f"File sync failed for {project.id}, metadata is ahead of files: "
                f"{type(e).__name__}: {e}"
            )
            raise SyncError(f"Failed to save files of project '{project.name}': {e}") from e

        updated_at = datetime.now(timezone.utc)
        try:
            saved = ProjectRecord.model_validate(row)
            if saved.updated_at is not None:
                updated_at = saved.updated_at
        except ValidationError:
            logger.warning(f"Upsert returned an unexpected row for {project.id}, using local time")

        logger.info(f"Project saved: {project.id}")
        return project.model_copy(update={"updated_at": updated_at})

    # ==================== Load ====================

    async def load_all(self, ctx: SessionContext) -> list[Project]:
        """All projects of the user, most recently updated first.

        Projects whose metadata or files are malformed are skipped.
        """
        owner_id = ctx.require_user()

        try:
            rows = await self.repo.query_projects_by_owner(owner_id)
        except Exception as e:
            raise SyncError(f"Failed to list projects: {e}") from e

        records = []
        for row in rows:
            try:
                records.append(ProjectRecord.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed project row {row.get('id')}: {e}")

        try:
            file_rows = await asyncio.gather(
                *(self.repo.query_files_by_project(record.id) for record in records)
            )
        except Exception as e:
            raise SyncError(f"Failed to fetch project files: {e}") from e

        projects = []
        for record, files in zip(records, file_rows):
            try:
                projects.append(self._build_project(record, files))
            except (ValidationError, ConsistencyError) as e:
                logger.warning(f"Skipping project {record.id} ({record.name}): {e}")

        logger.info(f"Loaded {len(projects)} of {len(rows)} projects")
        return projects

    async def load_one(self, ctx: SessionContext, project_id: str) -> Project:
        owner_id = ctx.require_user()

        try:
            row = await self.repo.get_project(project_id, owner_id)
            if row is None:
                raise ProjectNotFoundError(project_id)
            files = await self.repo.query_files_by_project(project_id)
        except ProjectNotFoundError:
            raise
        except Exception as e:
            raise SyncError(f"Failed to load project {project_id}: {e}") from e

        try:
            return self._build_project(ProjectRecord.model_validate(row), files)
        except ValidationError as e:
            raise ConsistencyError(f"Malformed records for project {project_id}: {e}") from e

    # ==================== Delete ====================

    async def delete(self, ctx: SessionContext, project_id: str) -> None:
        owner_id = ctx.require_user()
        try:
            await self.repo.delete_project(project_id, owner_id)
        except Exception as e:
            raise SyncError(f"Failed to delete project {project_id}: {e}") from e

    # ==================== Helpers ====================

    def _build_project(self, record: ProjectRecord, file_rows: list[dict]) -> Project:
        nodes = [to_node(FileRecord.model_validate(row)) for row in file_rows]
        store = TreeStore(nodes, separator=self.separator)
        now = datetime.now(timezone.utc)
        return Project(
            id=record.id,
            name=record.name,
            description=record.description,
            created_at=record.created_at or now,
            updated_at=record.updated_at or now,
            nodes=store.nodes,
        )


def to_file_record(node: Node, project_id: str) -> dict:
    """Node -> files table row. Root attachment is stored as parent_id null."""
    record = FileRecord(
        id=node.id,
        project_id=project_id,
        name=node.name,
        type=node.kind,
        parent_id=node.parent_id,
        content=node.content if node.is_file else None,
    )
    return record.model_dump(mode="json")


def to_node(record: FileRecord) -> Node:
    return Node(
        id=record.id,
        name=record.name,
        kind=record.type,
        parent_id=record.parent_id,
        content=record.content,
    )
