"""Directory walk behavior: ignore files, hidden entries, depth cap, ordering."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from lazyfinder.errors import RootDirectoryError
from lazyfinder.search.lister import DirectoryLister, path_sort_key, to_root_relative


def _write(root: Path, relative: str, text: str = "x\n") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class DirectoryListerTests(unittest.TestCase):
    def test_lists_relative_posix_paths_in_component_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("b.txt", "a.txt", "a/b", "a/c/d.py"):
                _write(root, name)

            files = DirectoryLister(root).list()

        self.assertEqual(files, ["a/b", "a/c/d.py", "a.txt", "b.txt"])

    def test_repeated_listing_is_identical(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("src/main.py", "src/util.py", "README.md"):
                _write(root, name)
            lister = DirectoryLister(root)

            first = lister.list()
            second = lister.list()

        self.assertEqual(first, second)
        self.assertEqual(lister.traversal_count, 2)

    def test_hidden_files_are_included(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root, ".env")
            _write(root, ".config/settings.toml")

            files = DirectoryLister(root).list()

        self.assertIn(".env", files)
        self.assertIn(".config/settings.toml", files)

    def test_gitignore_rules_apply_without_a_repository(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root, ".gitignore", "*.log\nbuild/\n")
            _write(root, "app.py")
            _write(root, "debug.log")
            _write(root, "build/out.js")

            files = DirectoryLister(root).list()

        self.assertEqual(files, [".gitignore", "app.py"])

    def test_nested_ignore_file_can_reinclude_a_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root, ".gitignore", "*.log\n")
            _write(root, "logs/.gitignore", "!keep.log\n")
            _write(root, "logs/keep.log")
            _write(root, "logs/drop.log")
            _write(root, "top.log")

            files = DirectoryLister(root).list()

        self.assertIn("logs/keep.log", files)
        self.assertNotIn("logs/drop.log", files)
        self.assertNotIn("top.log", files)

    def test_dot_ignore_and_git_info_exclude_are_honored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root, ".ignore", "vendor/\n")
            _write(root, ".git/info/exclude", "secret.txt\n")
            _write(root, ".git/HEAD", "ref: refs/heads/main\n")
            _write(root, "vendor/lib.py")
            _write(root, "secret.txt")
            _write(root, "main.py")

            files = DirectoryLister(root).list()

        self.assertEqual(files, [".ignore", "main.py"])

    def test_ignore_files_above_root_apply_inside_a_repository(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            repo = Path(tmp).resolve()
            _write(repo, ".git/HEAD", "ref: refs/heads/main\n")
            _write(repo, ".git/info/exclude", "*.secret\n")
            _write(repo, ".gitignore", "*.log\n/src/generated/\n")
            _write(repo, "src/.gitignore", "!keep.log\n")
            _write(repo, "src/debug.log")
            _write(repo, "src/keep.log")
            _write(repo, "src/keep.py")
            _write(repo, "src/keys.secret")
            _write(repo, "src/generated/out.py")

            files = DirectoryLister(repo / "src").list()

        self.assertEqual(files, [".gitignore", "keep.log", "keep.py"])

    def test_ignore_files_above_root_are_skipped_outside_a_repository(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp).resolve()
            _write(base, ".gitignore", "*.log\n")
            _write(base, "src/debug.log")

            files = DirectoryLister(base / "src").list()

        self.assertEqual(files, ["debug.log"])

    def test_git_directory_is_never_listed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root, ".git/config", "[core]\n")
            _write(root, "pkg/.git/objects/ab")
            _write(root, "pkg/mod.py")

            files = DirectoryLister(root).list()

        self.assertEqual(files, ["pkg/mod.py"])

    def test_depth_is_capped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root, "d1/shallow.txt")
            _write(root, "d1/d2/deep.txt")
            _write(root, "d1/d2/d3/deeper.txt")

            files = DirectoryLister(root, max_depth=2).list()

        self.assertEqual(files, ["d1/shallow.txt"])

    def test_default_depth_reaches_ten_levels(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            nine = "/".join(f"d{i}" for i in range(9))
            ten = "/".join(f"d{i}" for i in range(10))
            _write(root, f"{nine}/ok.txt")
            _write(root, f"{ten}/too_deep.txt")

            files = DirectoryLister(root).list()

        self.assertEqual(files, [f"{nine}/ok.txt"])

    @unittest.skipIf(not hasattr(os, "symlink"), "symlinks unavailable")
    def test_symlinked_directories_are_not_followed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root, "real/file.txt")
            try:
                os.symlink(root / "real", root / "loop", target_is_directory=True)
            except OSError:
                self.skipTest("cannot create symlink")

            files = DirectoryLister(root).list()

        self.assertEqual(files, ["real/file.txt"])

    def test_missing_root_raises_root_directory_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "missing"
            with self.assertRaises(RootDirectoryError) as ctx:
                DirectoryLister(missing).list()

        self.assertEqual(ctx.exception.root, missing)

    def test_file_root_raises_root_directory_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = _write(Path(tmp), "plain.txt")
            with self.assertRaises(RootDirectoryError):
                DirectoryLister(target).list()


class PathHelperTests(unittest.TestCase):
    def test_sort_key_places_directory_contents_before_dotted_siblings(self) -> None:
        paths = ["a.txt", "a/b", "a-b", "a/a/z"]
        self.assertEqual(sorted(paths, key=path_sort_key), ["a/a/z", "a/b", "a-b", "a.txt"])

    def test_to_root_relative_falls_back_to_absolute(self) -> None:
        root = Path("/srv/project")
        self.assertEqual(to_root_relative(root / "src" / "x.py", root), "src/x.py")
        self.assertEqual(to_root_relative(Path("/elsewhere/y.py"), root), "/elsewhere/y.py")


if __name__ == "__main__":
    unittest.main()
