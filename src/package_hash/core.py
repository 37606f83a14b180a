from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Sequence

from .config import load_config, resolve_algorithm, resolve_manifest_name
from .diff import DiffRunner, default_diff_runner
from .digest import accumulate
from .repository import collect_repo_state
from .salt import normalize_salt
from .targets import PathLike, as_path_list, resolve_target
from .versioning import get_self_fingerprint

_LOGGER = logging.getLogger(__name__)


def collect_fragments(
    paths: PathLike | Sequence[PathLike],
    salt: Any = None,
    *,
    manifest_name: str,
    diff_runner: DiffRunner,
    self_fingerprint: bytes,
) -> List[bytes]:
    """Build the ordered digest input: self, salt, then each target in caller order."""
    fragments: List[bytes] = [self_fingerprint, normalize_salt(salt)]
    for path in as_path_list(paths):
        target = resolve_target(path, manifest_name)
        fragments.extend(target.fragments())
        state = collect_repo_state(target.directory, diff_runner)
        if state is None:
            _LOGGER.debug("repo_absent dir=%s", target.directory)
            continue
        fragments.extend(state.fragments())
    return [fragment for fragment in fragments if fragment]


def hash_packages(
    paths: PathLike | Sequence[PathLike],
    salt: Any = None,
    *,
    config: Dict[str, Any] | None = None,
    diff_runner: DiffRunner | None = None,
    self_fingerprint: bytes | None = None,
) -> str:
    """Compute the cache key for one or more packages.

    ``paths`` may be a package directory, a manifest file, or a sequence of
    either; targets contribute in the order given. Raises TypeError for an
    unsupported salt (before touching the filesystem) and FileNotFoundError
    when a target or its manifest is missing.
    """
    normalize_salt(salt)
    cfg = config if config is not None else load_config()
    algorithm = resolve_algorithm(cfg)
    fragments = collect_fragments(
        paths,
        salt,
        manifest_name=resolve_manifest_name(cfg),
        diff_runner=diff_runner if diff_runner is not None else default_diff_runner(cfg),
        self_fingerprint=self_fingerprint if self_fingerprint is not None else get_self_fingerprint(),
    )
    return accumulate(fragments, algorithm)


async def hash_packages_async(
    paths: PathLike | Sequence[PathLike],
    salt: Any = None,
    *,
    config: Dict[str, Any] | None = None,
    diff_runner: DiffRunner | None = None,
    self_fingerprint: bytes | None = None,
) -> str:
    normalize_salt(salt)
    return await asyncio.to_thread(
        hash_packages,
        paths,
        salt,
        config=config,
        diff_runner=diff_runner,
        self_fingerprint=self_fingerprint,
    )
