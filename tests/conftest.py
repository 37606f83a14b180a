from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Dict, Iterable

import pytest

from package_hash.diff import DiffRunner, reset_default_diff_runner
from package_hash.repository import find_repository
from package_hash.versioning import reset_self_fingerprint

SELF = b"\x00self-fingerprint\xff"

MANIFEST = b'[project]\nname = "demo"\nversion = "1.0.0"\n'

TEST_CONFIG: Dict = {
    "hashing": {"algorithm": "md5", "manifest_name": "pyproject.toml"},
    "diff": {"enabled": True, "timeout_s": 30, "max_bytes": 1024 * 1024},
}


class StaticDiffRunner(DiffRunner):
    available = True

    def __init__(self, output: bytes | None) -> None:
        self.output = output
        self.calls = []

    def run(self, work_tree: Path, git_dir: Path) -> bytes | None:
        self.calls.append((work_tree, git_dir))
        return self.output


def md5_of(fragments: Iterable[bytes]) -> str:
    digest = hashlib.md5()
    for fragment in fragments:
        digest.update(fragment)
    return digest.hexdigest()


def write_package(root: Path, manifest: bytes = MANIFEST, name: str = "pyproject.toml") -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / name).write_bytes(manifest)
    return root.resolve()


def write_fake_git(
    root: Path,
    *,
    head: bytes | None = b"ref: refs/heads/master\n",
    packed_refs: bytes | None = None,
    refs: Dict[str, bytes] | None = None,
) -> Path:
    git_dir = root / ".git"
    git_dir.mkdir(parents=True, exist_ok=True)
    if head is not None:
        (git_dir / "HEAD").write_bytes(head)
    if packed_refs is not None:
        (git_dir / "packed-refs").write_bytes(packed_refs)
    for name, content in (refs or {}).items():
        ref_path = git_dir / name
        ref_path.parent.mkdir(parents=True, exist_ok=True)
        ref_path.write_bytes(content)
    return git_dir


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "PACKAGE_HASH_ALGORITHM",
        "PACKAGE_HASH_MANIFEST",
        "PACKAGE_HASH_DIFF_TIMEOUT_S",
        "PACKAGE_HASH_DISABLE_DIFF",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    reset_self_fingerprint()
    reset_default_diff_runner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    if find_repository(tmp_path.resolve()) is not None:
        pytest.skip("temporary directory sits inside a git repository")
    return tmp_path.resolve()
