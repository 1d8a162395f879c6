"""Custom exceptions"""


class AppError(Exception):
    """Base application error"""

    pass


class ServiceError(AppError):
    """Service layer error"""

    pass


class NotFoundError(AppError):
    """Referenced node or project does not exist"""

    pass


class NodeNotFoundError(NotFoundError):
    def __init__(self, node_id: str):
        super().__init__(f"Node not found: {node_id}")
        self.node_id = node_id


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: str):
        super().__init__(f"Project not found: {project_id}")
        self.project_id = project_id


class WrongKindError(AppError):
    """Operation is not valid for this node kind (file vs folder)"""

    pass


class InvalidNameError(AppError):
    """Node name is empty or contains the path separator"""

    pass


class NameConflictError(AppError):
    """A sibling with the same name already exists"""

    def __init__(self, name: str, parent_id):
        where = "root" if parent_id is None else f"folder {parent_id}"
        super().__init__(f"'{name}' already exists in {where}")
        self.name = name
        self.parent_id = parent_id


class UnauthenticatedError(AppError):
    """No user identity is bound to the operation"""

    pass


class SyncError(ServiceError):
    """Persistence service failure, original fault is kept in __cause__"""

    pass


class ConsistencyError(AppError):
    """Malformed file graph (cycle, dangling parent, duplicate id).

    Never expected at runtime: it means the node collection was built or
    persisted incorrectly somewhere else.
    """

    pass
