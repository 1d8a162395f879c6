"""Immutable file tree snapshots

A TreeStore keeps a project's nodes as a flat id -> Node mapping plus a
children index derived from parent_id links. Mutations never touch the
receiver: each one returns a new TreeStore and earlier snapshots stay valid.
"""

import logging
from typing import Iterable, Iterator, Optional
from uuid import uuid4

from cipherstudio.exceptions import (
    ConsistencyError,
    InvalidNameError,
    NameConflictError,
    NodeNotFoundError,
    WrongKindError,
)
from cipherstudio.models.schemas import Node, NodeKind

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "/"


class TreeStore:
    """Snapshot of a file hierarchy. parent_id None is the root."""

    def __init__(self, nodes: Iterable[Node] = (), separator: str = DEFAULT_SEPARATOR):
        if not separator:
            raise ValueError("Path separator cannot be empty")
        self.separator = separator
        self._nodes: dict[str, Node] = {}
        for node in nodes:
            if node.id in self._nodes:
                raise ConsistencyError(f"Duplicate node id: {node.id}")
            self._nodes[node.id] = node
        self._children = _index_children(self._nodes)
        self._check_structure()

    @classmethod
    def _derive(cls, nodes: dict[str, Node], separator: str) -> "TreeStore":
        """Build a snapshot from a mapping already known to be consistent"""
        store = cls.__new__(cls)
        store.separator = separator
        store._nodes = nodes
        store._children = _index_children(nodes)
        return store

    def _check_structure(self):
        for node in self._nodes.values():
            if node.parent_id is None:
                continue
            parent = self._nodes.get(node.parent_id)
            if parent is None:
                raise ConsistencyError(
                    f"Node {node.id} ({node.name}) points at missing parent {node.parent_id}"
                )
            if not parent.is_folder:
                raise ConsistencyError(f"Node {node.id} ({node.name}) is attached to file {parent.id}")

        # Every node is reachable from the root unless it sits on a cycle
        reachable = 0
        stack = list(self._children.get(None, ()))
        while stack:
            reachable += 1
            stack.extend(self._children.get(stack.pop(), ()))
        if reachable != len(self._nodes):
            raise ConsistencyError(
                f"Parent links contain a cycle: {len(self._nodes) - reachable} node(s) unreachable from root"
            )

    # ==================== Queries ====================

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes.values())

    def get(self, node_id: str) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def children_of(self, parent_id: Optional[str] = None) -> list[Node]:
        """Direct children of a folder, or of the root when parent_id is None"""
        if parent_id is not None and parent_id not in self._nodes:
            raise NodeNotFoundError(parent_id)
        return [self._nodes[child_id] for child_id in self._children.get(parent_id, ())]

    def path_of(self, node_id: str) -> str:
        """Ancestor names from the root down to the node, joined by the separator"""
        names = []
        seen = set()
        current: Optional[str] = node_id
        while current is not None:
            if current in seen:
                raise ConsistencyError(f"Cycle detected while resolving path of {node_id}")
            seen.add(current)
            node = self.get(current)
            names.append(node.name)
            current = node.parent_id
        return self.separator.join(reversed(names))

    def walk(self, parent_id: Optional[str] = None) -> Iterator[tuple[int, str, Node]]:
        """Depth-first (pre-order) listing of (depth, path, node) below parent_id"""
        prefix = "" if parent_id is None else self.path_of(parent_id) + self.separator
        stack = [(0, prefix, child_id) for child_id in reversed(self._children.get(parent_id, ()))]
        while stack:
            depth, parent_path, node_id = stack.pop()
            node = self._nodes[node_id]
            path = parent_path + node.name
            yield depth, path, node
            for child_id in reversed(self._children.get(node_id, ())):
                stack.append((depth + 1, path + self.separator, child_id))

    def list_files(self) -> Iterator[tuple[str, str]]:
        """(path, content) for every file, depth-first"""
        for _depth, path, node in self.walk():
            if node.is_file:
                yield path, node.content or ""

    def first_file(self) -> Optional[Node]:
        for _depth, _path, node in self.walk():
            if node.is_file:
                return node
        return None

    def descendants(self, node_id: str) -> set[str]:
        """Ids of the node and everything below it"""
        self.get(node_id)
        closure = {node_id}
        frontier = [node_id]
        while frontier:
            next_frontier = []
            for current in frontier:
                for child_id in self._children.get(current, ()):
                    if child_id in closure:
                        raise ConsistencyError(
                            f"Cycle detected at {child_id} while collecting descendants of {node_id}"
                        )
                    closure.add(child_id)
                    next_frontier.append(child_id)
            frontier = next_frontier
        return closure

    # ==================== Mutations ====================

    def create_node(
        self, parent_id: Optional[str], name: str, kind: NodeKind
    ) -> tuple["TreeStore", str]:
        """Add a file or folder under parent_id. Returns (new snapshot, new node id)."""
        try:
            kind = NodeKind(kind)
        except ValueError as e:
            raise WrongKindError(f"Unknown node kind: {kind!r}") from e
        if parent_id is not None:
            parent = self.get(parent_id)
            if not parent.is_folder:
                raise WrongKindError(f"Cannot create '{name}' inside file '{parent.name}'")

        name = self._clean_name(name)
        self._check_sibling_name(parent_id, name)

        node_id = str(uuid4())
        node = Node(id=node_id, name=name, kind=kind, parent_id=parent_id)
        nodes = dict(self._nodes)
        nodes[node_id] = node
        logger.debug(f"create_node: {kind.value} '{name}' -> {node_id}")
        return TreeStore._derive(nodes, self.separator), node_id

    def rename_node(self, node_id: str, new_name: str) -> "TreeStore":
        node = self.get(node_id)
        name = self._clean_name(new_name)
        if name == node.name:
            return self
        self._check_sibling_name(node.parent_id, name, exclude_id=node_id)
        return self._replace(node.model_copy(update={"name": name}))

    def delete_node(self, node_id: str) -> "TreeStore":
        """Remove the node together with all of its descendants"""
        doomed = self.descendants(node_id)
        nodes = {k: v for k, v in self._nodes.items() if k not in doomed}
        logger.debug(f"delete_node: {node_id} removed {len(doomed)} node(s)")
        return TreeStore._derive(nodes, self.separator)

    def update_content(self, node_id: str, content: str) -> "TreeStore":
        node = self.get(node_id)
        if not node.is_file:
            raise WrongKindError(f"'{node.name}' is a folder and has no content")
        return self._replace(node.model_copy(update={"content": content}))

    # ==================== Helpers ====================

    def _replace(self, node: Node) -> "TreeStore":
        nodes = dict(self._nodes)
        nodes[node.id] = node
        return TreeStore._derive(nodes, self.separator)

    def _clean_name(self, name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise InvalidNameError("Name cannot be empty")
        if self.separator in cleaned:
            raise InvalidNameError(f"Name cannot contain '{self.separator}': {cleaned}")
        return cleaned

    def _check_sibling_name(self, parent_id: Optional[str], name: str, exclude_id: Optional[str] = None):
        for child_id in self._children.get(parent_id, ()):
            if child_id != exclude_id and self._nodes[child_id].name == name:
                raise NameConflictError(name, parent_id)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeStore):
            return NotImplemented
        return self.separator == other.separator and self._nodes == other._nodes

    def __repr__(self) -> str:
        return f"TreeStore({len(self._nodes)} nodes)"


def _index_children(nodes: dict[str, Node]) -> dict[Optional[str], list[str]]:
    children: dict[Optional[str], list[str]] = {}
    for node in nodes.values():
        children.setdefault(node.parent_id, []).append(node.id)
    return children
