from __future__ import annotations

import hashlib
import logging
import threading
from importlib import metadata
from pathlib import Path
from typing import Iterable

_LOGGER = logging.getLogger(__name__)

_SELF_FINGERPRINT: bytes | None = None
_SELF_FINGERPRINT_LOCK = threading.Lock()


def get_package_hash_version() -> str:
    try:
        return metadata.version("package-hash")
    except metadata.PackageNotFoundError:
        return "0.0.0-dev"


def _iter_py_files(root: Path) -> Iterable[Path]:
    for path in sorted(root.rglob("*.py")):
        if "__pycache__" in path.parts:
            continue
        yield path


def code_fingerprint(root: Path | None = None) -> bytes:
    """Hash package .py files by relative path + bytes.

    Read errors propagate: a tool that cannot read its own sources cannot
    vouch for the keys it produces.
    """
    package_root = root or Path(__file__).resolve().parent
    digest = hashlib.sha256()
    for path in _iter_py_files(package_root):
        rel_path = path.relative_to(package_root).as_posix()
        digest.update(rel_path.encode("utf-8"))
        digest.update(b"\n")
        digest.update(path.read_bytes())
        digest.update(b"\n")
    return digest.digest()


def get_self_fingerprint() -> bytes:
    """Return the memoized fingerprint of this package's own sources."""
    global _SELF_FINGERPRINT
    cached = _SELF_FINGERPRINT
    if cached is not None:
        return cached
    with _SELF_FINGERPRINT_LOCK:
        if _SELF_FINGERPRINT is None:
            _SELF_FINGERPRINT = code_fingerprint()
            _LOGGER.debug(
                "self_fingerprint_computed version=%s digest=%s",
                get_package_hash_version(),
                _SELF_FINGERPRINT.hex(),
            )
        return _SELF_FINGERPRINT


def reset_self_fingerprint() -> None:
    global _SELF_FINGERPRINT
    with _SELF_FINGERPRINT_LOCK:
        _SELF_FINGERPRINT = None
