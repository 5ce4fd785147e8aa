"""Column helpers shared by the ORM models."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware current time; every stored timestamp is UTC."""
    return datetime.now(timezone.utc)
