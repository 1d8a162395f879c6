"""Seed content for new projects"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from cipherstudio.models.schemas import NodeKind, Project
from cipherstudio.services.tree_store import DEFAULT_SEPARATOR, TreeStore

APP_JSX = """export default function App() {
  return (
    <div className="app">
      <h1>Welcome to CipherStudio</h1>
      <p>Start coding your React app here!</p>
    </div>
  );
}"""

STYLES_CSS = """.app {
  font-family: sans-serif;
  text-align: center;
  padding: 2rem;
}

h1 {
  color: #3b82f6;
}
"""


def create_default_project(
    name: str = "My First Project",
    description: Optional[str] = None,
    separator: str = DEFAULT_SEPARATOR,
) -> Project:
    """New unsaved project with src/App.jsx and src/styles.css"""
    store = TreeStore(separator=separator)
    store, src_id = store.create_node(None, "src", NodeKind.FOLDER)
    store, app_id = store.create_node(src_id, "App.jsx", NodeKind.FILE)
    store = store.update_content(app_id, APP_JSX)
    store, styles_id = store.create_node(src_id, "styles.css", NodeKind.FILE)
    store = store.update_content(styles_id, STYLES_CSS)

    now = datetime.now(timezone.utc)
    return Project(
        id=str(uuid4()),
        name=name,
        description=description,
        created_at=now,
        updated_at=now,
        nodes=store.nodes,
    )
