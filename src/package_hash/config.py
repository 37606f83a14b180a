from __future__ import annotations

import copy
import hashlib
import os
import warnings
from pathlib import Path
from typing import Any, Dict

try:
    import tomllib  # py>=3.11
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib

CONFIG_PATH_DEFAULT = "package_hash.toml"

TEN_MEBIBYTES = 10 * 1024 * 1024

DEFAULT_CONFIG: Dict[str, Any] = {
    "hashing": {
        "algorithm": "md5",
        "manifest_name": "pyproject.toml",
    },
    "diff": {
        "enabled": True,
        "timeout_s": 30.0,
        "max_bytes": TEN_MEBIBYTES,
    },
}


def _merge_dict(default: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for key, default_value in default.items():
        if key not in override:
            merged[key] = copy.deepcopy(default_value)
            continue
        override_value = override[key]
        if isinstance(default_value, dict) and isinstance(override_value, dict):
            merged[key] = _merge_dict(default_value, override_value)
        else:
            merged[key] = override_value
    for key, value in override.items():
        if key not in merged:
            merged[key] = value
    return merged


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    hashing = config.setdefault("hashing", {})
    diff = config.setdefault("diff", {})

    algorithm = os.getenv("PACKAGE_HASH_ALGORITHM", "").strip()
    if algorithm:
        hashing["algorithm"] = algorithm
    manifest = os.getenv("PACKAGE_HASH_MANIFEST", "").strip()
    if manifest:
        hashing["manifest_name"] = manifest
    timeout = os.getenv("PACKAGE_HASH_DIFF_TIMEOUT_S", "").strip()
    if timeout:
        diff["timeout_s"] = timeout
    if _env_flag("PACKAGE_HASH_DISABLE_DIFF"):
        diff["enabled"] = False
    return config


def load_config(path: str | Path = CONFIG_PATH_DEFAULT) -> Dict[str, Any]:
    """Load config with safe defaults; missing or unreadable files are non-fatal."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = Path(path)
    if config_path.exists():
        try:
            with config_path.open("rb") as handle:
                raw = tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError):
            raw = None
            warnings.warn(
                f"{config_path} could not be parsed; using defaults.",
                RuntimeWarning,
            )
        if isinstance(raw, dict):
            config = _merge_dict(config, raw)
    return _apply_env_overrides(config)


def resolve_algorithm(config: Dict[str, Any] | None) -> str:
    hashing = config.get("hashing", {}) if isinstance(config, dict) else {}
    value = str(hashing.get("algorithm") or DEFAULT_CONFIG["hashing"]["algorithm"]).strip().lower()
    if value not in hashlib.algorithms_available:
        raise ValueError(f"unsupported digest algorithm: {value}")
    if value.startswith("shake_"):
        raise ValueError(f"variable-length digest not supported: {value}")
    return value


def resolve_manifest_name(config: Dict[str, Any] | None) -> str:
    hashing = config.get("hashing", {}) if isinstance(config, dict) else {}
    value = str(hashing.get("manifest_name", "")).strip()
    if not value or Path(value).name != value:
        if value:
            warnings.warn(
                f"hashing.manifest_name must be a bare file name, got {value!r}; using default.",
                RuntimeWarning,
            )
        return DEFAULT_CONFIG["hashing"]["manifest_name"]
    return value


def resolve_diff_config(config: Dict[str, Any] | None) -> Dict[str, Any]:
    diff_cfg = config.get("diff", {}) if isinstance(config, dict) else {}
    resolved = dict(DEFAULT_CONFIG["diff"])
    if isinstance(diff_cfg, dict):
        resolved.update(diff_cfg)

    resolved["enabled"] = bool(resolved.get("enabled", True))
    try:
        timeout = float(resolved.get("timeout_s") or 0)
    except (TypeError, ValueError):
        warnings.warn("diff.timeout_s must be numeric; using default.", RuntimeWarning)
        timeout = DEFAULT_CONFIG["diff"]["timeout_s"]
    resolved["timeout_s"] = timeout if timeout > 0 else None
    try:
        max_bytes = int(resolved.get("max_bytes") or TEN_MEBIBYTES)
    except (TypeError, ValueError):
        warnings.warn("diff.max_bytes must be an integer; using default.", RuntimeWarning)
        max_bytes = TEN_MEBIBYTES
    resolved["max_bytes"] = max_bytes if max_bytes > 0 else TEN_MEBIBYTES
    return resolved
