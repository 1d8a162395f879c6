"""File record operations for Supabase repository"""

import asyncio
import logging

logger = logging.getLogger(__name__)


class FileOpsMixin:
    """Mixin for rows of the files table"""

    async def query_files_by_project(self, project_id: str) -> list[dict]:
        """All file and folder records of a project, unordered"""

        def _sync_fetch():
            client = self._get_client()
            response = client.table(self.files_table).select("*").eq("project_id", project_id).execute()
            return response.data

        return await asyncio.to_thread(_sync_fetch)

    async def delete_files_by_project(self, project_id: str) -> None:
        def _sync_delete():
            client = self._get_client()
            client.table(self.files_table).delete().eq("project_id", project_id).execute()

        await asyncio.to_thread(_sync_delete)

    async def insert_files(self, records: list[dict]) -> None:
        """Bulk insert file records in chunks"""
        if not records:
            return

        def _sync_insert(chunk: list[dict]):
            client = self._get_client()
            client.table(self.files_table).insert(chunk).execute()

        # Chunks run in order so parent folders land before their children
        chunk_size = self.insert_chunk_size
        for i in range(0, len(records), chunk_size):
            await asyncio.to_thread(_sync_insert, records[i : i + chunk_size])
        logger.info(f"Inserted {len(records)} file records")
