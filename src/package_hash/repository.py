from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from .diff import UNAVAILABLE_DIFF_RUNNER, DiffRunner

_LOGGER = logging.getLogger(__name__)

GIT_DIR_NAME = ".git"

_SYMBOLIC_REF_RE = re.compile(r"^ref:\s*(.+)$")
_GITDIR_FILE_RE = re.compile(r"^gitdir:\s*(.+)$")


@dataclass(frozen=True)
class RepositoryState:
    """Version-control artifacts attached to one target; every field is optional."""

    head: bytes | None = None
    packed_refs: bytes | None = None
    ref: bytes | None = None
    diff: bytes | None = None

    def fragments(self) -> List[bytes]:
        ordered = (self.head, self.packed_refs, self.ref, self.diff)
        return [fragment for fragment in ordered if fragment]


def _try_read(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except OSError:
        return None


def _resolve_git_dir(dot_git: Path) -> Path | None:
    if dot_git.is_dir():
        return dot_git
    content = _try_read(dot_git)
    if content is None:
        return None
    match = _GITDIR_FILE_RE.match(content.decode("utf-8", errors="replace").strip())
    if not match:
        return None
    git_dir = Path(match.group(1).strip())
    if not git_dir.is_absolute():
        git_dir = dot_git.parent / git_dir
    return git_dir.resolve()


def find_repository(directory: Path) -> Tuple[Path, Path] | None:
    """Walk up from ``directory`` and return ``(work_tree, git_dir)`` or None."""
    for candidate in (directory, *directory.parents):
        dot_git = candidate / GIT_DIR_NAME
        if not dot_git.exists():
            continue
        git_dir = _resolve_git_dir(dot_git)
        if git_dir is not None:
            return candidate, git_dir
    return None


def _ref_path(git_dir: Path, head: bytes) -> Path | None:
    match = _SYMBOLIC_REF_RE.match(head.decode("utf-8", errors="replace").strip())
    if not match:
        return None
    return git_dir / match.group(1).strip()


def collect_repo_state(
    directory: Path,
    diff_runner: DiffRunner = UNAVAILABLE_DIFF_RUNNER,
) -> RepositoryState | None:
    located = find_repository(directory)
    if located is None:
        return None
    work_tree, git_dir = located

    head = _try_read(git_dir / "HEAD")
    if head is None:
        _LOGGER.debug("repo_head_unreadable git_dir=%s", git_dir)
    packed_refs = _try_read(git_dir / "packed-refs")

    ref = None
    if head is not None:
        ref_path = _ref_path(git_dir, head)
        if ref_path is not None:
            ref = _try_read(ref_path)

    diff = diff_runner.run(work_tree, git_dir) if diff_runner.available else None
    return RepositoryState(head=head, packed_refs=packed_refs, ref=ref, diff=diff)
