"""Supabase repository - async data access for projects and files"""

import logging
from typing import Optional
from supabase import create_client, Client

from cipherstudio.services.supabase.project_ops import ProjectOpsMixin
from cipherstudio.services.supabase.file_ops import FileOpsMixin
from cipherstudio.services.supabase.auth_ops import AuthOpsMixin

logger = logging.getLogger(__name__)


class SupabaseRepo(
    ProjectOpsMixin,
    FileOpsMixin,
    AuthOpsMixin,
):
    """Async Supabase data access layer"""

    def __init__(
        self,
        url: str,
        key: str,
        projects_table: str = "projects",
        files_table: str = "files",
        insert_chunk_size: int = 500,
    ):
        logger.info(f"Initializing SupabaseRepo: url={url[:30]}...")
        self.url = url
        self.key = key
        self.projects_table = projects_table
        self.files_table = files_table
        self.insert_chunk_size = insert_chunk_size
        self._client: Optional[Client] = None

    def _get_client(self) -> Client:
        """Lazy init Supabase client"""
        if self._client is None:
            logger.info("Creating Supabase client...")
            self._client = create_client(self.url, self.key)
            logger.info("Supabase client created")
        return self._client
