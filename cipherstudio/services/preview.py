"""Sandbox preview file map

The preview renderer takes a mapping of absolute paths to file code and
applies its own template defaults for anything missing.
"""

from typing import Optional

from cipherstudio.services.tree_store import TreeStore

DEFAULT_ACTIVE_FILE = "/App.jsx"


def build_preview_files(store: TreeStore) -> dict[str, dict[str, str]]:
    """{"/src/App.jsx": {"code": "..."}} for every file in the tree"""
    return {_absolute(store, path): {"code": content} for path, content in store.list_files()}


def active_file_path(store: TreeStore, file_id: Optional[str]) -> str:
    """Preview path of the selected file, or the template entry point"""
    if file_id is None or file_id not in store:
        return DEFAULT_ACTIVE_FILE
    node = store.get(file_id)
    if not node.is_file:
        return DEFAULT_ACTIVE_FILE
    return _absolute(store, store.path_of(file_id))


def _absolute(store: TreeStore, path: str) -> str:
    # Renderer paths always use "/"
    if store.separator != "/":
        path = path.replace(store.separator, "/")
    return "/" + path
