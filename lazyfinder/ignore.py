"""Ignore-file aware path filtering for directory walks.

Reads ``.gitignore`` and ``.ignore`` files as the walk descends. When the root
sits inside a git work tree, the ignore files of every directory from the
repository top down to the root and the repository's ``info/exclude`` apply
too. Each file's patterns are scoped to the directory that contains it; deeper
files override shallower ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pathspec import GitIgnoreSpec

IGNORE_FILENAMES = (".gitignore", ".ignore")
ALWAYS_SKIPPED_DIRS = frozenset({".git"})


@dataclass(frozen=True)
class _ScopedSpec:
    """Compiled patterns plus the directory they apply to.

    ``base`` is the root-relative directory for files found during the walk.
    ``prefix`` is the root's path as seen from an ignore file above the root.
    """

    base: str
    spec: GitIgnoreSpec
    prefix: str = ""

    def relative(self, rel_path: str) -> str | None:
        """Return ``rel_path`` as this spec sees it, or ``None`` when outside it."""
        if self.prefix:
            return f"{self.prefix}/{rel_path}"
        if not self.base:
            return rel_path
        prefix = self.base + "/"
        if not rel_path.startswith(prefix):
            return None
        return rel_path[len(prefix) :]


def _read_lines(path: Path) -> list[str]:
    try:
        return path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return []


def _resolve_git_dir(work_tree: Path) -> Path | None:
    """Locate the git directory for ``work_tree`` (plain dir or ``gitdir:`` file)."""
    git_entry = work_tree / ".git"
    if git_entry.is_dir():
        return git_entry
    if not git_entry.is_file():
        return None
    for raw_line in _read_lines(git_entry):
        stripped = raw_line.strip()
        if stripped.startswith("gitdir:"):
            git_dir = Path(stripped[len("gitdir:") :].strip())
            if not git_dir.is_absolute():
                git_dir = (work_tree / git_dir).resolve()
            return git_dir
    return None


def _find_work_tree(root: Path) -> Path | None:
    """Return the nearest directory at or above ``root`` that holds ``.git``."""
    for candidate in (root, *root.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def _directory_ignore_lines(directory: Path) -> list[str]:
    lines: list[str] = []
    for name in IGNORE_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            lines.extend(_read_lines(candidate))
    return lines


@dataclass(frozen=True)
class IgnoreRules:
    """Stack of ignore specs active for one directory during a walk.

    Instances are immutable: ``for_directory`` returns a new stack with the
    child directory's own ignore files appended, so sibling subtrees never see
    each other's rules.
    """

    scopes: tuple[_ScopedSpec, ...] = ()

    @classmethod
    def for_root(cls, root: Path) -> IgnoreRules:
        """Build the rule stack for the walk root.

        Precedence, lowest first: ``info/exclude``, then ignore files from the
        repository top down to the root.
        """
        resolved = root.resolve()
        rules = cls()
        work_tree = _find_work_tree(resolved)
        if work_tree is not None:
            git_dir = _resolve_git_dir(work_tree)
            if git_dir is not None:
                rules = rules.with_lines(
                    "",
                    _read_lines(git_dir / "info" / "exclude"),
                    prefix=_root_from(work_tree, resolved),
                )
            ancestors = [parent for parent in resolved.parents if parent.is_relative_to(work_tree)]
            for ancestor in reversed(ancestors):
                rules = rules.with_lines(
                    "",
                    _directory_ignore_lines(ancestor),
                    prefix=_root_from(ancestor, resolved),
                )
        return rules.with_lines("", _directory_ignore_lines(root))

    def with_lines(self, base: str, lines: list[str], *, prefix: str = "") -> IgnoreRules:
        patterns = [line for line in lines if line.strip()]
        if not patterns:
            return self
        spec = GitIgnoreSpec.from_lines(patterns)
        return IgnoreRules(scopes=(*self.scopes, _ScopedSpec(base=base, spec=spec, prefix=prefix)))

    def for_directory(self, directory: Path, rel_dir: str) -> IgnoreRules:
        """Return rules for ``directory`` including its own ignore files."""
        return self.with_lines(rel_dir, _directory_ignore_lines(directory))

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        """Return whether a root-relative POSIX path is ignored.

        The deepest scope with a definite decision wins, which is how negated
        patterns in nested ignore files re-include paths.
        """
        if is_dir and rel_path.rsplit("/", 1)[-1] in ALWAYS_SKIPPED_DIRS:
            return True
        ignored = False
        for scope in self.scopes:
            local = scope.relative(rel_path)
            if not local:
                continue
            result = scope.spec.check_file(local + "/" if is_dir else local)
            if result.include is not None:
                ignored = bool(result.include)
        return ignored


def _root_from(directory: Path, root: Path) -> str:
    """POSIX path of ``root`` relative to ``directory`` ("" when they match)."""
    if directory == root:
        return ""
    return root.relative_to(directory).as_posix()


__all__ = ["ALWAYS_SKIPPED_DIRS", "IGNORE_FILENAMES", "IgnoreRules"]
