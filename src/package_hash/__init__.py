"""Deterministic cache keys for filesystem packages."""

from .config import DEFAULT_CONFIG, load_config
from .core import collect_fragments, hash_packages, hash_packages_async
from .diff import (
    UNAVAILABLE_DIFF_RUNNER,
    DiffRunner,
    GitDiffRunner,
    default_diff_runner,
)
from .digest import accumulate
from .repository import RepositoryState, collect_repo_state, find_repository
from .salt import SALT_TYPE_ERROR, Salt, SaltKind, normalize_salt
from .targets import Target, resolve_target
from .versioning import get_package_hash_version, get_self_fingerprint

__all__ = [
    "DEFAULT_CONFIG",
    "SALT_TYPE_ERROR",
    "UNAVAILABLE_DIFF_RUNNER",
    "DiffRunner",
    "GitDiffRunner",
    "RepositoryState",
    "Salt",
    "SaltKind",
    "Target",
    "accumulate",
    "collect_fragments",
    "collect_repo_state",
    "default_diff_runner",
    "find_repository",
    "get_package_hash_version",
    "get_self_fingerprint",
    "hash_packages",
    "hash_packages_async",
    "load_config",
    "normalize_salt",
    "resolve_target",
]
