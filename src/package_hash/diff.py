from __future__ import annotations

import logging
import os
import shutil
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .config import TEN_MEBIBYTES, resolve_diff_config

_LOGGER = logging.getLogger(__name__)

DIFF_ARGS: List[str] = ["--no-pager", "diff", "HEAD", "--no-color", "--no-ext-diff"]

_GIT_EXECUTABLE: str | None = None
_GIT_DETECTED = False
_DETECT_LOCK = threading.Lock()


class DiffRunner:
    """Capability for capturing uncommitted changes of a working tree."""

    available: bool = False

    def run(self, work_tree: Path, git_dir: Path) -> bytes | None:
        return None


class UnavailableDiffRunner(DiffRunner):
    def __repr__(self) -> str:
        return "UnavailableDiffRunner()"


UNAVAILABLE_DIFF_RUNNER = UnavailableDiffRunner()


@dataclass
class GitDiffRunner(DiffRunner):
    executable: str
    timeout_s: float | None = 30.0
    max_bytes: int = TEN_MEBIBYTES
    available: bool = True

    def run(self, work_tree: Path, git_dir: Path) -> bytes | None:
        """Return ``git diff HEAD`` output, or None when it cannot be captured.

        Inherited GIT_* variables are dropped so the diff always targets
        ``work_tree``. stderr is discarded so git diagnostics never reach
        the caller's error stream.
        """
        env = {key: value for key, value in os.environ.items() if not key.startswith("GIT_")}
        env["GIT_DIR"] = str(git_dir)
        env["GIT_WORK_TREE"] = str(work_tree)
        try:
            result = subprocess.run(
                [self.executable, *DIFF_ARGS],
                cwd=work_tree,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                timeout=self.timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired:
            _LOGGER.debug("diff_unavailable dir=%s reason=timeout", work_tree)
            return None
        except (OSError, subprocess.SubprocessError) as exc:
            _LOGGER.debug("diff_unavailable dir=%s reason=%s", work_tree, type(exc).__name__)
            return None
        if result.returncode != 0:
            _LOGGER.debug("diff_unavailable dir=%s reason=exit_%s", work_tree, result.returncode)
            return None
        if len(result.stdout) > self.max_bytes:
            _LOGGER.debug("diff_unavailable dir=%s reason=too_large", work_tree)
            return None
        return result.stdout


def _runner_for(diff_cfg: Dict[str, Any], executable: str | None) -> DiffRunner:
    if not diff_cfg["enabled"]:
        return UNAVAILABLE_DIFF_RUNNER
    if executable is None:
        return UNAVAILABLE_DIFF_RUNNER
    return GitDiffRunner(
        executable=executable,
        timeout_s=diff_cfg["timeout_s"],
        max_bytes=diff_cfg["max_bytes"],
    )


def default_diff_runner(config: Dict[str, Any] | None = None) -> DiffRunner:
    """Feature-detect the git binary once per process and reuse it.

    The runner itself is rebuilt from ``config`` so timeout and size limits
    follow the caller's settings.
    """
    global _GIT_EXECUTABLE, _GIT_DETECTED
    with _DETECT_LOCK:
        if not _GIT_DETECTED:
            _GIT_EXECUTABLE = shutil.which("git")
            _GIT_DETECTED = True
            if _GIT_EXECUTABLE is None:
                _LOGGER.debug("diff_capability_missing reason=git_not_found")
        executable = _GIT_EXECUTABLE
    return _runner_for(resolve_diff_config(config), executable)


def reset_default_diff_runner() -> None:
    global _GIT_EXECUTABLE, _GIT_DETECTED
    with _DETECT_LOCK:
        _GIT_EXECUTABLE = None
        _GIT_DETECTED = False
