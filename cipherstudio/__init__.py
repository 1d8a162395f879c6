"""CipherStudio project trees and Supabase synchronization"""

from cipherstudio.exceptions import (
    AppError,
    ServiceError,
    NotFoundError,
    NodeNotFoundError,
    ProjectNotFoundError,
    WrongKindError,
    InvalidNameError,
    NameConflictError,
    UnauthenticatedError,
    SyncError,
    ConsistencyError,
)
from cipherstudio.models import NodeKind, Node, Project, FileRecord, ProjectRecord
from cipherstudio.services.session import SessionContext
from cipherstudio.services.tree_store import TreeStore
from cipherstudio.services.sync_engine import SyncEngine

__all__ = [
    # Exceptions
    "AppError",
    "ServiceError",
    "NotFoundError",
    "NodeNotFoundError",
    "ProjectNotFoundError",
    "WrongKindError",
    "InvalidNameError",
    "NameConflictError",
    "UnauthenticatedError",
    "SyncError",
    "ConsistencyError",
    # Models
    "NodeKind",
    "Node",
    "Project",
    "FileRecord",
    "ProjectRecord",
    # Core
    "SessionContext",
    "TreeStore",
    "SyncEngine",
]
