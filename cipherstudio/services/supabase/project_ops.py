"""Project operations for Supabase repository"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


class ProjectOpsMixin:
    """Mixin for rows of the projects table"""

    async def upsert_project(
        self,
        project_id: str,
        owner_id: str,
        name: str,
        description: Optional[str] = None,
    ) -> dict:
        """Insert or update project metadata, refreshing updated_at"""

        def _sync_upsert():
            client = self._get_client()
            data = {
                "id": project_id,
                "user_id": owner_id,
                "name": name,
                "description": description or None,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
            response = client.table(self.projects_table).upsert(data).execute()
            return response.data[0] if response.data else data

        return await asyncio.to_thread(_sync_upsert)

    async def query_projects_by_owner(self, owner_id: str) -> list[dict]:
        """All projects of an owner, most recently updated first"""

        def _sync_list():
            client = self._get_client()
            response = (
                client.table(self.projects_table)
                .select("*")
                .eq("user_id", owner_id)
                .order("updated_at", desc=True)
                .execute()
            )
            return response.data

        return await asyncio.to_thread(_sync_list)

    async def get_project(self, project_id: str, owner_id: str) -> Optional[dict]:
        """Get project by ID within the owner's scope"""

        def _sync_get():
            client = self._get_client()
            response = (
                client.table(self.projects_table)
                .select("*")
                .eq("id", project_id)
                .eq("user_id", owner_id)
                .limit(1)
                .execute()
            )
            return response.data[0] if response.data else None

        return await asyncio.to_thread(_sync_get)

    async def delete_project(self, project_id: str, owner_id: str) -> None:
        """Delete project row, file rows are removed by the FK cascade"""

        def _sync_delete():
            client = self._get_client()
            (
                client.table(self.projects_table)
                .delete()
                .eq("id", project_id)
                .eq("user_id", owner_id)
                .execute()
            )

        await asyncio.to_thread(_sync_delete)
        logger.info(f"Project deleted: {project_id}")
