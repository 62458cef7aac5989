from __future__ import annotations

import uuid


def new_resource_id() -> str:
    """Client-side identifier for a new resource row and its storage folder."""
    return str(uuid.uuid4())
