from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

PathLike = str | os.PathLike


@dataclass(frozen=True)
class Target:
    directory: Path
    manifest_bytes: bytes

    def fragments(self) -> List[bytes]:
        return [os.fsencode(str(self.directory)), self.manifest_bytes]


def as_path_list(paths: PathLike | Sequence[PathLike]) -> List[PathLike]:
    if isinstance(paths, (str, os.PathLike)):
        return [paths]
    return list(paths)


def resolve_target(path: PathLike, manifest_name: str) -> Target:
    """Resolve a package directory or a manifest file to ``(directory, manifest bytes)``.

    Raises FileNotFoundError (errno ENOENT) when neither the path nor the
    expected manifest exists.
    """
    # Lexical: symlinks stay as the caller named them.
    resolved = Path(os.path.abspath(path))
    if resolved.is_dir():
        manifest = resolved / manifest_name
    else:
        manifest = resolved
    return Target(directory=manifest.parent, manifest_bytes=manifest.read_bytes())
