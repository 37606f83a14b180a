from __future__ import annotations

import hashlib
from typing import Iterable

DEFAULT_ALGORITHM = "md5"


def accumulate(fragments: Iterable[bytes | None], algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Fold ordered fragments into one lowercase hex digest; empty/None fragments are skipped."""
    digest = hashlib.new(algorithm)
    for fragment in fragments:
        if fragment:
            digest.update(fragment)
    return digest.hexdigest()
