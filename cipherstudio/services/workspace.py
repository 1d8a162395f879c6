"""Editor session: owns the current project snapshot

The workspace is the only place that replaces the "current" reference. Tree
edits go through TreeStore and swap in the returned snapshot; persistence
happens only on explicit save, new project or open.
"""

import asyncio
import logging
from typing import Optional

from cipherstudio.exceptions import NotFoundError, SyncError, WrongKindError
from cipherstudio.models.schemas import NodeKind, Project
from cipherstudio.services.session import SessionContext
from cipherstudio.services.sync_engine import SyncEngine
from cipherstudio.services.templates import create_default_project
from cipherstudio.services.tree_store import TreeStore
from cipherstudio.utils.retry import retry_async

logger = logging.getLogger(__name__)


class Workspace:
    """Current project, project list and file selection of one user"""

    def __init__(
        self,
        engine: SyncEngine,
        default_project_name: str = "My First Project",
        save_max_attempts: int = 1,
        save_retry_delay: float = 1.0,
    ):
        self.engine = engine
        self.default_project_name = default_project_name
        self.save_max_attempts = max(1, save_max_attempts)
        self.save_retry_delay = save_retry_delay

        self.current: Optional[Project] = None
        self.projects: list[Project] = []
        self.selected_file_id: Optional[str] = None

        self._store: Optional[TreeStore] = None
        self._saved_store: Optional[TreeStore] = None
        self._save_lock = asyncio.Lock()
        self._open_lock = asyncio.Lock()

    @property
    def store(self) -> TreeStore:
        if self._store is None:
            raise NotFoundError("No project is open")
        return self._store

    @property
    def is_dirty(self) -> bool:
        """True when the tree differs from what was last loaded or saved"""
        return self._store is not None and self._store != self._saved_store

    # ==================== Project lifecycle ====================

    async def open(self, ctx: SessionContext) -> Project:
        """Load the user's projects and open the most recent one.

        A user without projects gets the default project, saved right away.
        """
        async with self._open_lock:
            return await self._open(ctx)

    async def ensure_open(self, ctx: SessionContext) -> Project:
        """Open the workspace unless a project is already current"""
        async with self._open_lock:
            if self.current is None:
                await self._open(ctx)
            return self.current

    async def _open(self, ctx: SessionContext) -> Project:
        # Load and seed stay under _open_lock so a new user gets one default project
        projects = await self.engine.load_all(ctx)
        if not projects:
            logger.info("No projects found, creating default project")
            project = await self._save(ctx, self._new_default())
            projects = [project]

        self.projects = projects
        self._set_current(projects[0])
        return projects[0]

    async def new_project(self, ctx: SessionContext, name: Optional[str] = None) -> Project:
        project = await self._save(ctx, self._new_default(name))
        self._remember(project)
        self._set_current(project)
        logger.info(f"New project created: {project.id}")
        return project

    async def switch_project(self, ctx: SessionContext, project_id: str) -> Project:
        project = await self.engine.load_one(ctx, project_id)
        self._set_current(project)
        logger.info(f"Switched to project {project.id} ({project.name})")
        return project

    async def refresh(self, ctx: SessionContext) -> list[Project]:
        self.projects = await self.engine.load_all(ctx)
        return self.projects

    async def delete_project(self, ctx: SessionContext, project_id: str) -> None:
        await self.engine.delete(ctx, project_id)
        self.projects = [p for p in self.projects if p.id != project_id]
        if self.current is not None and self.current.id == project_id:
            if self.projects:
                self._set_current(self.projects[0])
            else:
                self.current = None
                self._store = None
                self._saved_store = None
                self.selected_file_id = None

    async def save(self, ctx: SessionContext) -> Project:
        """Persist the current project"""
        if self.current is None:
            raise NotFoundError("No project is open")

        project = self.current.with_nodes(self.store.nodes)
        store = self.store
        saved = await self._save(ctx, project)

        # Edits made while the save was in flight stay in the current snapshot
        if self.current is not None and self.current.id == saved.id:
            self.current = self.current.model_copy(update={"updated_at": saved.updated_at})
            self._saved_store = store
        self._remember(saved)
        return saved

    # ==================== Tree edits ====================

    def create_node(self, parent_id: Optional[str], name: str, kind: NodeKind) -> str:
        store, node_id = self.store.create_node(parent_id, name, kind)
        self._apply(store)
        if NodeKind(kind) == NodeKind.FILE:
            self.selected_file_id = node_id
        return node_id

    def rename_node(self, node_id: str, new_name: str) -> None:
        self._apply(self.store.rename_node(node_id, new_name))

    def delete_node(self, node_id: str) -> None:
        self._apply(self.store.delete_node(node_id))

    def update_content(self, node_id: str, content: str) -> None:
        self._apply(self.store.update_content(node_id, content))

    def select_file(self, file_id: str) -> None:
        node = self.store.get(file_id)
        if not node.is_file:
            raise WrongKindError(f"'{node.name}' is a folder and cannot be opened")
        self.selected_file_id = file_id

    # ==================== Helpers ====================

    def _new_default(self, name: Optional[str] = None) -> Project:
        return create_default_project(
            name=name or self.default_project_name,
            separator=self.engine.separator,
        )

    async def _save(self, ctx: SessionContext, project: Project) -> Project:
        save = retry_async(
            max_attempts=self.save_max_attempts,
            initial_delay=self.save_retry_delay,
            exceptions=(SyncError,),
            log_prefix="[Save] ",
        )(self.engine.save)

        async with self._save_lock:
            return await save(ctx, project)

    def _set_current(self, project: Project) -> None:
        store = self.engine.tree_of(project)
        self.current = project
        self._store = store
        self._saved_store = store
        self.selected_file_id = None
        self._fix_selection()

    def _apply(self, store: TreeStore) -> None:
        self._store = store
        self.current = self.current.with_nodes(store.nodes)
        self._fix_selection()

    def _fix_selection(self) -> None:
        if self.selected_file_id is not None and self.selected_file_id not in self._store:
            self.selected_file_id = None
        if self.selected_file_id is None:
            first = self._store.first_file()
            self.selected_file_id = first.id if first else None

    def _remember(self, project: Project) -> None:
        """Put a just-saved project at the top of the list"""
        self.projects = [project] + [p for p in self.projects if p.id != project.id]
