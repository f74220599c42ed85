"""Environment-variable-based configuration for the nightly scheduler."""

from __future__ import annotations

import os
from pathlib import Path

SNAPSHOT_PATH: Path = Path(
    os.environ.get("LOAD_ENGINE_SNAPSHOT", "~/.load_engine/snapshot.json")
).expanduser()
NIGHTLY_HOUR: int = int(os.environ.get("SCHEDULER_HOUR", "2"))
NIGHTLY_MINUTE: int = int(os.environ.get("SCHEDULER_MINUTE", "0"))
PROJECTION_HORIZON_DAYS: int = int(os.environ.get("PROJECTION_HORIZON_DAYS", "42"))
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
