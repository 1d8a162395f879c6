"""Test Workspace"""
import asyncio

import pytest

from cipherstudio.exceptions import NotFoundError, SyncError, WrongKindError
from cipherstudio.models.schemas import NodeKind
from cipherstudio.services.workspace import Workspace


@pytest.fixture
def workspace(engine):
    return Workspace(engine, save_retry_delay=0)


def find(workspace, path):
    for _depth, node_path, node in workspace.store.walk():
        if node_path == path:
            return node
    raise AssertionError(f"{path} not in tree")


@pytest.mark.asyncio
class TestOpen:
    async def test_first_open_creates_default_project(self, workspace, ctx, fake_repo):
        project = await workspace.open(ctx)

        assert project.name == "My First Project"
        assert len(fake_repo.projects) == 1
        assert workspace.projects == [project]
        assert workspace.selected_file_id == find(workspace, "src/App.jsx").id
        assert not workspace.is_dirty

    async def test_open_picks_most_recent(self, workspace, ctx):
        await workspace.open(ctx)
        second = await workspace.new_project(ctx, name="Second")

        fresh = Workspace(workspace.engine)
        opened = await fresh.open(ctx)

        assert opened.id == second.id
        assert [p.name for p in fresh.projects] == ["Second", "My First Project"]

    async def test_store_requires_open_project(self, workspace):
        with pytest.raises(NotFoundError):
            workspace.store

    async def test_concurrent_first_open_seeds_one_project(self, engine, ctx, fake_repo):
        workspace = Workspace(engine)
        original_query = fake_repo.query_projects_by_owner

        async def slow_query(owner_id):
            rows = await original_query(owner_id)
            await asyncio.sleep(0.01)
            return rows

        fake_repo.query_projects_by_owner = slow_query
        first, second = await asyncio.gather(workspace.open(ctx), workspace.open(ctx))

        assert first.id == second.id
        assert len(fake_repo.projects) == 1
        assert fake_repo.calls.count("upsert_project") == 1
        assert [p.id for p in workspace.projects] == [first.id]

    async def test_ensure_open_keeps_current_project(self, workspace, ctx, fake_repo):
        project = await workspace.open(ctx)
        workspace.create_node(None, "README.md", NodeKind.FILE)
        calls = len(fake_repo.calls)

        assert (await workspace.ensure_open(ctx)).id == project.id
        assert len(fake_repo.calls) == calls
        assert workspace.is_dirty


@pytest.mark.asyncio
class TestEdits:
    async def test_create_file_selects_it(self, workspace, ctx):
        await workspace.open(ctx)
        src = find(workspace, "src")

        node_id = workspace.create_node(src.id, "index.js", NodeKind.FILE)

        assert workspace.selected_file_id == node_id
        assert workspace.store.path_of(node_id) == "src/index.js"
        assert workspace.is_dirty
        assert len(workspace.current.nodes) == 4

    async def test_create_folder_keeps_selection(self, workspace, ctx):
        await workspace.open(ctx)
        selected = workspace.selected_file_id

        workspace.create_node(None, "public", NodeKind.FOLDER)
        assert workspace.selected_file_id == selected

    async def test_delete_selected_ancestor_moves_selection(self, workspace, ctx):
        await workspace.open(ctx)
        readme = workspace.create_node(None, "README.md", NodeKind.FILE)
        workspace.select_file(find(workspace, "src/App.jsx").id)

        workspace.delete_node(find(workspace, "src").id)

        assert workspace.selected_file_id == readme

    async def test_delete_everything_clears_selection(self, workspace, ctx):
        await workspace.open(ctx)
        workspace.delete_node(find(workspace, "src").id)

        assert workspace.selected_file_id is None
        assert workspace.current.nodes == ()

    async def test_select_folder_rejected(self, workspace, ctx):
        await workspace.open(ctx)
        with pytest.raises(WrongKindError):
            workspace.select_file(find(workspace, "src").id)

    async def test_rename_and_edit(self, workspace, ctx):
        await workspace.open(ctx)
        app = find(workspace, "src/App.jsx")

        workspace.rename_node(app.id, "Main.jsx")
        workspace.update_content(app.id, "export default () => null;")

        node = workspace.store.get(app.id)
        assert node.name == "Main.jsx"
        assert node.content == "export default () => null;"


@pytest.mark.asyncio
class TestSave:
    async def test_save_persists_edits(self, workspace, ctx, engine):
        await workspace.open(ctx)
        workspace.create_node(None, "README.md", NodeKind.FILE)

        saved = await workspace.save(ctx)

        assert not workspace.is_dirty
        loaded = await engine.load_one(ctx, saved.id)
        assert set(loaded.nodes) == set(workspace.current.nodes)
        assert workspace.projects[0].id == saved.id

    async def test_save_failure_keeps_edits(self, workspace, ctx, fake_repo):
        await workspace.open(ctx)
        workspace.create_node(None, "README.md", NodeKind.FILE)
        fake_repo.fail_on.add("insert_files")

        with pytest.raises(SyncError):
            await workspace.save(ctx)

        assert workspace.is_dirty
        assert find(workspace, "README.md")

    async def test_save_retries_when_configured(self, engine, ctx, fake_repo):
        workspace = Workspace(engine, save_max_attempts=3, save_retry_delay=0)
        await workspace.open(ctx)

        original_insert = fake_repo.insert_files
        failures = []

        async def flaky_insert(records):
            if not failures:
                failures.append(1)
                raise RuntimeError("connection reset")
            await original_insert(records)

        fake_repo.insert_files = flaky_insert
        await workspace.save(ctx)

        assert failures == [1]
        assert not workspace.is_dirty

    async def test_saves_are_serialized(self, workspace, ctx, fake_repo):
        await workspace.open(ctx)

        active = []
        overlaps = []
        original_upsert = fake_repo.upsert_project

        async def slow_upsert(*args, **kwargs):
            if active:
                overlaps.append(True)
            active.append(True)
            await asyncio.sleep(0.01)
            result = await original_upsert(*args, **kwargs)
            active.pop()
            return result

        fake_repo.upsert_project = slow_upsert
        await asyncio.gather(workspace.save(ctx), workspace.save(ctx))

        assert overlaps == []

    async def test_save_without_project(self, workspace, ctx):
        with pytest.raises(NotFoundError):
            await workspace.save(ctx)


@pytest.mark.asyncio
class TestProjects:
    async def test_switch_discards_unsaved_edits(self, workspace, ctx):
        first = await workspace.open(ctx)
        await workspace.new_project(ctx, name="Second")
        workspace.create_node(None, "scratch.txt", NodeKind.FILE)

        await workspace.switch_project(ctx, first.id)

        assert workspace.current.id == first.id
        assert not workspace.is_dirty
        assert workspace.selected_file_id == find(workspace, "src/App.jsx").id

    async def test_delete_current_switches_to_next(self, workspace, ctx):
        first = await workspace.open(ctx)
        second = await workspace.new_project(ctx, name="Second")

        await workspace.delete_project(ctx, second.id)

        assert workspace.current.id == first.id
        assert [p.id for p in workspace.projects] == [first.id]

    async def test_delete_last_project(self, workspace, ctx):
        project = await workspace.open(ctx)
        await workspace.delete_project(ctx, project.id)

        assert workspace.current is None
        assert workspace.selected_file_id is None
        assert workspace.projects == []

    async def test_refresh(self, workspace, ctx):
        await workspace.open(ctx)
        projects = await workspace.refresh(ctx)
        assert len(projects) == 1
