"""File tree API routes for the open project"""

from fastapi import APIRouter, Depends

from cipherstudio.api.dependencies import get_workspace
from cipherstudio.models.schemas import (
    CreateNodeRequest,
    DeleteNodeResponse,
    NodeResponse,
    RenameNodeRequest,
    UpdateContentRequest,
)
from cipherstudio.services.workspace import Workspace

router = APIRouter()


@router.post("", response_model=NodeResponse)
async def create_node(request: CreateNodeRequest, workspace: Workspace = Depends(get_workspace)):
    """Create a file or folder under parent_id (null for the project root)"""
    node_id = workspace.create_node(request.parent_id, request.name, request.kind)
    return NodeResponse(id=node_id, path=workspace.store.path_of(node_id))


@router.patch("/{node_id}", response_model=NodeResponse)
async def rename_node(
    node_id: str,
    request: RenameNodeRequest,
    workspace: Workspace = Depends(get_workspace),
):
    workspace.rename_node(node_id, request.name)
    return NodeResponse(id=node_id, path=workspace.store.path_of(node_id))


@router.put("/{node_id}/content", response_model=NodeResponse)
async def update_content(
    node_id: str,
    request: UpdateContentRequest,
    workspace: Workspace = Depends(get_workspace),
):
    workspace.update_content(node_id, request.content)
    return NodeResponse(id=node_id, path=workspace.store.path_of(node_id))


@router.post("/{node_id}/select", response_model=NodeResponse)
async def select_file(node_id: str, workspace: Workspace = Depends(get_workspace)):
    workspace.select_file(node_id)
    return NodeResponse(id=node_id, path=workspace.store.path_of(node_id))


@router.delete("/{node_id}", response_model=DeleteNodeResponse)
async def delete_node(node_id: str, workspace: Workspace = Depends(get_workspace)):
    """Delete a node and everything below it"""
    removed = workspace.store.descendants(node_id)
    workspace.delete_node(node_id)
    return DeleteNodeResponse(deleted=sorted(removed))
