"""Tests for the ready-made traversal tasks."""

from __future__ import annotations

import pytest

from treesweep.models.hooks import TraversalHooks
from treesweep.models.statistics import ObjectType
from treesweep.core.engine import TraversalEngine
from treesweep.tasks import DirectoryHunter, FilePurger, TreeCopier, TreeLister, TreeMover, wipe


@pytest.fixture
def project(tmp_path):
    """A tree with two ``cache`` directories at different depths."""
    root = tmp_path / "project"
    (root / "cache").mkdir(parents=True)
    (root / "cache" / "blob.bin").write_bytes(b"\0" * 100)
    (root / "src" / "cache" / "sub").mkdir(parents=True)
    (root / "src" / "cache" / "index").write_text("idx")
    (root / "src" / "cache" / "sub" / "deep.bin").write_bytes(b"\0" * 10)
    (root / "src" / "main.py").write_text("print('hi')\n")
    return root


def _directory_actions(engine) -> dict[str, str]:
    return {
        e.virtual_path: e.action
        for e in engine.statistics
        if e.object_type is ObjectType.DIRECTORY
    }


class TestDirectoryHunter:
    def test_deletes_every_match(self, project):
        hunter = DirectoryHunter(project, ["cache"])
        summary = hunter.run()

        assert not (project / "cache").exists()
        assert not (project / "src" / "cache").exists()
        assert (project / "src" / "main.py").exists()

        dirs = _directory_actions(hunter.engine)
        assert dirs["/"] == "Hello"
        assert dirs["/src"] == "Hello"
        assert dirs["/cache"] == "Deleted"
        assert dirs["/src/cache"] == "Deleted"
        assert dirs["/src/cache/sub"] == "Deleted"
        assert summary.directories_deleted == 3
        assert summary.files_deleted == 3
        assert summary.bytes_deleted == 113

    def test_unmatched_files_are_not_visited(self, project):
        hunter = DirectoryHunter(project, ["cache"])
        hunter.run()

        paths = [e.virtual_path for e in hunter.engine.statistics]
        assert "/src/main.py" not in paths

    def test_delete_contents(self, project):
        hunter = DirectoryHunter(project, ["cache"], delete_contents=True)
        hunter.run()

        assert (project / "cache").is_dir()
        assert list((project / "cache").iterdir()) == []
        assert list((project / "src" / "cache").iterdir()) == []
        assert _directory_actions(hunter.engine)["/src/cache"] == "ContentsDeleted"

    def test_dry_run(self, project):
        summary = DirectoryHunter(project, ["cache"], dry_run=True).run()

        assert summary.dry_run
        assert summary.directories_deleted == 3
        assert (project / "src" / "cache" / "sub" / "deep.bin").exists()

    def test_caller_hooks_still_fire(self, project):
        deleted = []
        hooks = TraversalHooks(on_directory_deleted=lambda d, e: deleted.append(e.virtual_path(d)))
        DirectoryHunter(project, ["cache"], hooks=hooks).run()

        assert deleted == ["/cache", "/src/cache/sub", "/src/cache"]

    def test_caller_hooks_are_left_untouched(self, project):
        hooks = TraversalHooks()
        original = hooks.on_directory_filter_match
        DirectoryHunter(project / "src", ["cache"], hooks=hooks).run()

        assert hooks.on_directory_filter_match is original
        TraversalEngine(project, hooks=hooks).start()
        assert (project / "cache" / "blob.bin").exists()

    def test_root_itself_can_match(self, project):
        summary = DirectoryHunter(project / "cache", ["cache"]).run()

        assert summary.directories_deleted == 1
        assert not (project / "cache").exists()

    def test_requires_names(self, project):
        with pytest.raises(ValueError):
            DirectoryHunter(project, [])


class TestFilePurger:
    @pytest.fixture
    def junk(self, tmp_path):
        root = tmp_path / "junk"
        (root / "photos").mkdir(parents=True)
        (root / "draft.tmp").write_text("tmp")
        (root / "notes.txt").write_text("keep")
        (root / "photos" / "Thumbs.db").write_bytes(b"\0" * 64)
        (root / "photos" / "cat.jpg").write_bytes(b"\0" * 10)
        return root

    def test_deletes_matching_files(self, junk):
        summary = FilePurger(junk, ["*.tmp", "Thumbs.db"]).run()

        assert not (junk / "draft.tmp").exists()
        assert not (junk / "photos" / "Thumbs.db").exists()
        assert (junk / "notes.txt").exists()
        assert (junk / "photos" / "cat.jpg").exists()
        assert summary.files_deleted == 2
        assert summary.bytes_deleted == 67
        assert summary.directories_deleted == 0

    def test_only_matching_files_are_visited(self, junk):
        purger = FilePurger(junk, ["*.tmp"])
        purger.run()

        assert [e.virtual_path for e in purger.engine.statistics if e.object_type is ObjectType.FILE] == [
            "/draft.tmp"
        ]

    def test_dry_run(self, junk):
        summary = FilePurger(junk, ["*.tmp"], dry_run=True).run()

        assert summary.files_deleted == 1
        assert (junk / "draft.tmp").exists()

    def test_caller_hooks_are_left_untouched(self, junk):
        hooks = TraversalHooks()
        original = hooks.on_file_hello
        FilePurger(junk, ["*.tmp"], hooks=hooks, dry_run=True).run()

        assert hooks.on_file_hello is original
        TraversalEngine(junk, hooks=hooks).start()
        assert (junk / "draft.tmp").exists()

    def test_requires_patterns(self, junk):
        with pytest.raises(ValueError):
            FilePurger(junk, [])


class TestWipe:
    def test_removes_everything(self, tree):
        summary = wipe(tree)

        assert not tree.exists()
        assert summary.directories_deleted == 4
        assert summary.bytes_deleted == 24

    def test_keep_root(self, tree):
        summary = wipe(tree, keep_root=True)

        assert tree.is_dir()
        assert list(tree.iterdir()) == []
        assert summary.directories_deleted == 3

    def test_dry_run(self, tree):
        summary = wipe(tree, dry_run=True)

        assert summary.files_deleted == 3
        assert (tree / "b" / "c" / "z.txt").exists()


class TestTreeLister:
    def test_lines(self, tree):
        lines = TreeLister(tree).run()

        assert lines == [
            "root/",
            "  a/",
            "    x.txt (5 B)",
            "  b/",
            "    y.txt (12 B)",
            "    c/",
            "      z.txt (7 B)",
        ]

    def test_files_are_recorded_as_listed(self, tree):
        lister = TreeLister(tree)
        lister.run()

        assert lister.engine.statistics.count(ObjectType.FILE, "Listed") == 3

    def test_file_pattern(self, tree):
        lines = TreeLister(tree, file_pattern="y*").run()

        assert "    y.txt (12 B)" in lines
        assert not any("x.txt" in line for line in lines)

    def test_directory_pattern_limits_files(self, tree):
        lines = TreeLister(tree, directory_pattern="b").run()

        assert "  a/" in lines
        assert "    y.txt (12 B)" in lines
        assert not any("x.txt" in line or "z.txt" in line for line in lines)

    def test_rerun_starts_fresh(self, tree):
        lister = TreeLister(tree)
        lister.run()
        lines = lister.run()

        assert len(lines) == 7
        assert len(lister.engine.statistics) == 7
        assert tree.exists()


def _snapshot(root) -> dict[str, str | None]:
    """Relative path -> file text (None for directories) of everything under *root*."""
    return {
        str(p.relative_to(root)): None if p.is_dir() else p.read_text()
        for p in sorted(root.rglob("*"))
    }


class TestTreeCopier:
    def test_copies_tree(self, tree, tmp_path):
        destination = tmp_path / "out" / "copy"
        copier = TreeCopier(tree, destination)
        summary = copier.run()

        assert _snapshot(destination) == _snapshot(tree)
        assert (tree / "b" / "c" / "z.txt").exists()
        assert summary.directories_created == 4
        assert summary.files_transferred == 3
        assert summary.bytes_transferred == 24
        assert summary.directories_removed == 0
        assert copier.engine.statistics.count(ObjectType.FILE, "Copied") == 3

    def test_dry_run_creates_nothing(self, tree, tmp_path):
        destination = tmp_path / "copy"
        summary = TreeCopier(tree, destination, dry_run=True).run()

        assert not destination.exists()
        assert summary.dry_run
        assert summary.directories_created == 4
        assert summary.files_transferred == 3

    def test_existing_file_needs_overwrite(self, tree, tmp_path):
        destination = tmp_path / "copy"
        (destination / "a").mkdir(parents=True)
        (destination / "a" / "x.txt").write_text("old")

        with pytest.raises(FileExistsError):
            TreeCopier(tree, destination).run()

        summary = TreeCopier(tree, destination, overwrite=True).run()
        assert (destination / "a" / "x.txt").read_text() == "xxxxx"
        assert summary.directories_created == 2

    def test_caller_skip_is_not_copied(self, tree, tmp_path):
        destination = tmp_path / "copy"
        hooks = TraversalHooks(on_file_hello=lambda f, e, i: i.skip() if f.name == "y.txt" else None)
        copier = TreeCopier(tree, destination, hooks=hooks)
        summary = copier.run()

        assert not (destination / "b" / "y.txt").exists()
        assert (destination / "b" / "c" / "z.txt").exists()
        assert summary.files_transferred == 2
        assert copier.engine.statistics.count(ObjectType.FILE, "Skipped") == 1

    def test_destination_inside_source_is_rejected(self, tree):
        with pytest.raises(ValueError):
            TreeCopier(tree, tree / "a" / "copy")
        with pytest.raises(ValueError):
            TreeCopier(tree, tree)


class TestTreeMover:
    def test_moves_tree(self, tree, tmp_path):
        before = _snapshot(tree)
        destination = tmp_path / "moved"
        mover = TreeMover(tree, destination)
        summary = mover.run()

        assert not tree.exists()
        assert _snapshot(destination) == before
        assert summary.files_transferred == 3
        assert summary.bytes_transferred == 24
        assert summary.directories_removed == 4
        assert _directory_actions(mover.engine) == {"/": "Deleted", "/a": "Deleted", "/b": "Deleted", "/b/c": "Deleted"}

    def test_dry_run(self, tree, tmp_path):
        destination = tmp_path / "moved"
        summary = TreeMover(tree, destination, dry_run=True).run()

        assert (tree / "b" / "c" / "z.txt").exists()
        assert not destination.exists()
        assert summary.files_transferred == 3
        assert summary.directories_removed == 4

    def test_non_empty_destination_is_rejected(self, tree, tmp_path):
        destination = tmp_path / "moved"
        destination.mkdir()
        (destination / "keep.txt").write_text("keep")

        with pytest.raises(FileExistsError):
            TreeMover(tree, destination).run()
        assert (tree / "a" / "x.txt").exists()

    def test_empty_destination_is_accepted(self, tree, tmp_path):
        destination = tmp_path / "moved"
        destination.mkdir()
        summary = TreeMover(tree, destination).run()

        assert (destination / "b" / "y.txt").exists()
        assert summary.directories_created == 3

    def test_skipped_file_keeps_its_directories(self, tree, tmp_path):
        destination = tmp_path / "moved"
        hooks = TraversalHooks(on_file_hello=lambda f, e, i: i.skip() if f.name == "z.txt" else None)
        summary = TreeMover(tree, destination, hooks=hooks).run()

        assert (tree / "b" / "c" / "z.txt").exists()
        assert not (tree / "a").exists()
        assert not (tree / "b" / "y.txt").exists()
        assert (destination / "a" / "x.txt").exists()
        assert (destination / "b" / "y.txt").exists()
        assert not (destination / "b" / "c" / "z.txt").exists()
        assert summary.directories_removed == 1

    def test_directory_skipped_on_match_keeps_its_files(self, tree, tmp_path):
        destination = tmp_path / "moved"
        hooks = TraversalHooks(on_directory_filter_match=lambda d, e, i: i.skip() if d.name == "b" else None)
        summary = TreeMover(tree, destination, hooks=hooks).run()

        assert (tree / "b" / "y.txt").exists()
        assert not (tree / "b" / "c").exists()
        assert (destination / "b" / "c" / "z.txt").exists()
        assert summary.files_transferred == 2
        assert summary.directories_removed == 2

    def test_subtree_deleted_by_caller_is_not_moved(self, tree, tmp_path):
        destination = tmp_path / "moved"
        hooks = TraversalHooks(on_directory_hello=lambda d, e, i: i.request_delete() if d.name == "b" else None)
        summary = TreeMover(tree, destination, hooks=hooks).run()

        assert not tree.exists()
        assert (destination / "a" / "x.txt").exists()
        assert not (destination / "b").exists()
        assert summary.files_transferred == 1
        assert summary.directories_removed == 4

    def test_caller_goodbye_still_fires(self, tree, tmp_path):
        seen = []
        hooks = TraversalHooks(on_directory_goodbye=lambda d, e, i: seen.append(e.virtual_path(d)))
        TreeMover(tree, tmp_path / "moved", hooks=hooks).run()

        assert seen == ["/a", "/b/c", "/b", "/"]
        assert hooks.on_directory_hello is TraversalHooks().on_directory_hello
