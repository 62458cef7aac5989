from __future__ import annotations

from datetime import datetime, timezone


def now_utc_iso() -> str:
    """UTC timestamp for created_at/updated_at columns, seconds precision."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()
