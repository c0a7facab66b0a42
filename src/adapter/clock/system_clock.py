from datetime import datetime, timezone


class SystemClock:
    """Clock backed by the process's wall-clock time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
