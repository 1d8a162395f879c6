"""Pydantic models"""

from cipherstudio.models.schemas import (
    NodeKind,
    Node,
    Project,
    FileRecord,
    ProjectRecord,
)

__all__ = [
    # Tree
    "NodeKind",
    "Node",
    "Project",
    # Persistence
    "FileRecord",
    "ProjectRecord",
]
