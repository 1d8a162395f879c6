"""Pydantic schemas"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, model_validator


class NodeKind(str, Enum):
    """Node kinds, values match the `type` column of the files table"""

    FILE = "file"
    FOLDER = "folder"


# ========== Tree entities ==========
class Node(BaseModel):
    """One file or folder. parent_id None means attached to the root."""

    id: str
    name: str
    kind: NodeKind
    parent_id: Optional[str] = None
    content: Optional[str] = None

    class Config:
        frozen = True
        from_attributes = True

    @model_validator(mode="before")
    @classmethod
    def normalize_content(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        kind = data.get("kind")
        if kind in (NodeKind.FOLDER, NodeKind.FOLDER.value):
            return {**data, "content": None}
        if data.get("content") is None:
            return {**data, "content": ""}
        return data

    @property
    def is_file(self) -> bool:
        return self.kind == NodeKind.FILE

    @property
    def is_folder(self) -> bool:
        return self.kind == NodeKind.FOLDER


class Project(BaseModel):
    """Project metadata plus its flat node collection"""

    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    nodes: tuple[Node, ...] = ()

    class Config:
        frozen = True

    def with_nodes(self, nodes) -> "Project":
        """Copy of this project holding another node collection"""
        return self.model_copy(update={"nodes": tuple(nodes)})


# ========== Persisted records ==========
class FileRecord(BaseModel):
    """Row of the files table"""

    id: str
    project_id: str
    name: str
    type: NodeKind
    parent_id: Optional[str] = None
    content: Optional[str] = None


class ProjectRecord(BaseModel):
    """Row of the projects table"""

    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ========== API ==========
class HealthResponse(BaseModel):
    status: str
    version: str


class ProjectSummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    updated_at: datetime
    node_count: int = 0


class TreeEntry(BaseModel):
    """Depth-first listing row"""

    id: str
    name: str
    kind: NodeKind
    parent_id: Optional[str] = None
    path: str
    depth: int


class ProjectDetailResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    selected_file_id: Optional[str] = None
    is_dirty: bool = False
    nodes: list[Node] = Field(default_factory=list)


class CreateNodeRequest(BaseModel):
    parent_id: Optional[str] = None
    name: str
    kind: NodeKind


class NodeResponse(BaseModel):
    id: str
    path: str


class RenameNodeRequest(BaseModel):
    name: str


class UpdateContentRequest(BaseModel):
    content: str


class PreviewResponse(BaseModel):
    files: dict[str, dict[str, str]]
    active_file: str


class DeleteNodeResponse(BaseModel):
    deleted: list[str]


class SignOutResponse(BaseModel):
    signed_out: bool
    workspace_dropped: bool
