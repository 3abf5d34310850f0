"""Row id generation."""

from __future__ import annotations

import time
import uuid


def new_id(prefix: str) -> str:
    """Random id such as ``cv_3f2a...``."""
    return f"{prefix}_{uuid.uuid4().hex}"


def new_sortable_id(prefix: str) -> str:
    """Id whose lexical order follows creation order within a process."""
    return f"{prefix}_{time.time_ns():020d}_{uuid.uuid4().hex[:12]}"
