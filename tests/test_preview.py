"""Test preview file map and default project"""
from cipherstudio.models.schemas import NodeKind
from cipherstudio.services.preview import DEFAULT_ACTIVE_FILE, active_file_path, build_preview_files
from cipherstudio.services.templates import APP_JSX, STYLES_CSS, create_default_project
from cipherstudio.services.tree_store import TreeStore


class TestDefaultProject:
    def test_seeded_tree(self):
        project = create_default_project()
        store = TreeStore(project.nodes)

        assert project.name == "My First Project"
        assert dict(store.list_files()) == {"src/App.jsx": APP_JSX, "src/styles.css": STYLES_CSS}
        assert [n.name for n in store.children_of(None)] == ["src"]

    def test_fresh_ids_each_time(self):
        a = create_default_project()
        b = create_default_project()
        assert a.id != b.id
        assert not {n.id for n in a.nodes} & {n.id for n in b.nodes}


class TestPreviewFiles:
    def test_absolute_paths(self):
        store = TreeStore(create_default_project().nodes)
        files = build_preview_files(store)

        assert set(files) == {"/src/App.jsx", "/src/styles.css"}
        assert files["/src/App.jsx"] == {"code": APP_JSX}

    def test_folders_excluded(self):
        store, _ = TreeStore().create_node(None, "empty", NodeKind.FOLDER)
        assert build_preview_files(store) == {}

    def test_separator_normalized(self):
        store = TreeStore(separator="\\")
        store, src = store.create_node(None, "src", NodeKind.FOLDER)
        store, _ = store.create_node(src, "index.js", NodeKind.FILE)
        assert list(build_preview_files(store)) == ["/src/index.js"]

    def test_active_file(self):
        store = TreeStore()
        store, src = store.create_node(None, "src", NodeKind.FOLDER)
        store, app = store.create_node(src, "App.jsx", NodeKind.FILE)

        assert active_file_path(store, app) == "/src/App.jsx"
        assert active_file_path(store, src) == DEFAULT_ACTIVE_FILE
        assert active_file_path(store, None) == DEFAULT_ACTIVE_FILE
        assert active_file_path(store, "gone") == DEFAULT_ACTIVE_FILE
