"""Dependency injection for API routes"""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException

from cipherstudio.config import settings
from cipherstudio.exceptions import UnauthenticatedError
from cipherstudio.services.session import SessionContext
from cipherstudio.services.supabase.repo import SupabaseRepo
from cipherstudio.services.sync_engine import SyncEngine
from cipherstudio.services.workspace import Workspace

logger = logging.getLogger(__name__)

# Singleton instances
_supabase_repo: Optional[SupabaseRepo] = None
_sync_engine: Optional[SyncEngine] = None

# One editor session per user
_workspaces: dict[str, Workspace] = {}


def get_supabase_repo() -> SupabaseRepo:
    """Get Supabase repository instance"""
    global _supabase_repo
    if _supabase_repo is None:
        _supabase_repo = SupabaseRepo(
            url=settings.supabase_url,
            key=settings.supabase_key,
            projects_table=settings.projects_table,
            files_table=settings.files_table,
        )
    return _supabase_repo


def get_sync_engine() -> SyncEngine:
    global _sync_engine
    if _sync_engine is None:
        _sync_engine = SyncEngine(get_supabase_repo(), separator=settings.path_separator)
    return _sync_engine


async def get_session(
    authorization: str = Header(default="", description="Bearer <Supabase access token>"),
) -> SessionContext:
    """Resolve the caller's identity from the Authorization header"""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Missing bearer token")

    try:
        return await get_supabase_repo().get_session(token.strip())
    except UnauthenticatedError as e:
        raise HTTPException(status_code=401, detail=str(e))


async def get_workspace(ctx: SessionContext = Depends(get_session)) -> Workspace:
    """Workspace of the caller, opened on first use"""
    workspace = _workspaces.get(ctx.user_id)
    if workspace is None:
        workspace = Workspace(
            get_sync_engine(),
            default_project_name=settings.default_project_name,
            save_max_attempts=settings.save_max_attempts,
            save_retry_delay=settings.save_retry_delay,
        )
        _workspaces[ctx.user_id] = workspace
        logger.info(f"Workspace created for user {ctx.user_id}")

    await workspace.ensure_open(ctx)
    return workspace


def drop_workspace(user_id: str) -> bool:
    """Forget the caller's workspace, unsaved edits included"""
    workspace = _workspaces.pop(user_id, None)
    if workspace is not None:
        logger.info(f"Workspace dropped for user {user_id}")
    return workspace is not None
