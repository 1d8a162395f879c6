"""Projects API routes"""

from fastapi import APIRouter, Depends

from cipherstudio.api.dependencies import get_session, get_workspace
from cipherstudio.models.schemas import (
    PreviewResponse,
    ProjectDetailResponse,
    ProjectSummary,
    TreeEntry,
)
from cipherstudio.services.preview import active_file_path, build_preview_files
from cipherstudio.services.session import SessionContext
from cipherstudio.services.workspace import Workspace

router = APIRouter()


def _detail(workspace: Workspace) -> ProjectDetailResponse:
    project = workspace.current
    return ProjectDetailResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        created_at=project.created_at,
        updated_at=project.updated_at,
        selected_file_id=workspace.selected_file_id,
        is_dirty=workspace.is_dirty,
        nodes=list(workspace.store.nodes),
    )


@router.get("", response_model=list[ProjectSummary])
async def list_projects(
    refresh: bool = False,
    ctx: SessionContext = Depends(get_session),
    workspace: Workspace = Depends(get_workspace),
):
    """List the caller's projects, most recently updated first"""
    projects = await workspace.refresh(ctx) if refresh else workspace.projects
    return [
        ProjectSummary(
            id=p.id,
            name=p.name,
            description=p.description,
            updated_at=p.updated_at,
            node_count=len(p.nodes),
        )
        for p in projects
    ]


@router.post("", response_model=ProjectDetailResponse)
async def create_project(
    ctx: SessionContext = Depends(get_session),
    workspace: Workspace = Depends(get_workspace),
):
    """Create, save and open a new default project"""
    await workspace.new_project(ctx)
    return _detail(workspace)


@router.get("/current", response_model=ProjectDetailResponse)
async def get_current_project(workspace: Workspace = Depends(get_workspace)):
    return _detail(workspace)


@router.get("/current/tree", response_model=list[TreeEntry])
async def get_current_tree(workspace: Workspace = Depends(get_workspace)):
    """Depth-first listing of the open project"""
    return [
        TreeEntry(
            id=node.id,
            name=node.name,
            kind=node.kind,
            parent_id=node.parent_id,
            path=path,
            depth=depth,
        )
        for depth, path, node in workspace.store.walk()
    ]


@router.get("/current/preview", response_model=PreviewResponse)
async def get_current_preview(workspace: Workspace = Depends(get_workspace)):
    """File map for the sandbox preview"""
    store = workspace.store
    return PreviewResponse(
        files=build_preview_files(store),
        active_file=active_file_path(store, workspace.selected_file_id),
    )


@router.post("/save", response_model=ProjectDetailResponse)
async def save_current_project(
    ctx: SessionContext = Depends(get_session),
    workspace: Workspace = Depends(get_workspace),
):
    await workspace.save(ctx)
    return _detail(workspace)


@router.post("/{project_id}/open", response_model=ProjectDetailResponse)
async def open_project(
    project_id: str,
    ctx: SessionContext = Depends(get_session),
    workspace: Workspace = Depends(get_workspace),
):
    """Load a saved project, discarding unsaved edits of the current one"""
    await workspace.switch_project(ctx, project_id)
    return _detail(workspace)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    ctx: SessionContext = Depends(get_session),
    workspace: Workspace = Depends(get_workspace),
):
    await workspace.delete_project(ctx, project_id)
    return {"status": "deleted", "project_id": project_id}
