from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

SALT_TYPE_ERROR = "Salt must be a bytes, dict, list, tuple or str"


class SaltKind(str, Enum):
    ABSENT = "absent"
    BYTES = "bytes"
    TEXT = "text"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class Salt:
    kind: SaltKind
    value: bytes = b""

    def fragment(self) -> bytes | None:
        """Bytes appended to the digest input, or None when nothing is appended."""
        if self.kind is SaltKind.ABSENT or not self.value:
            return None
        return self.value


def serialize_structured(value: Any) -> str:
    # Insertion order is the canonical order; keys are never sorted.
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def classify_salt(salt: Any) -> Salt:
    if salt is None:
        return Salt(SaltKind.ABSENT)
    if isinstance(salt, (bytes, bytearray, memoryview)):
        return Salt(SaltKind.BYTES, bytes(salt))
    if isinstance(salt, str):
        return Salt(SaltKind.TEXT, salt.encode("utf-8", "surrogatepass"))
    if isinstance(salt, (dict, list, tuple)):
        return Salt(SaltKind.STRUCTURED, serialize_structured(salt).encode("utf-8", "surrogatepass"))
    raise TypeError(SALT_TYPE_ERROR)


def normalize_salt(salt: Any) -> bytes:
    """Validate ``salt`` and return its digest contribution (``b""`` for none)."""
    return classify_salt(salt).fragment() or b""
