from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path


@dataclass(frozen=True)
class ScreenshotEvent:
    """A candidate file reported by the watcher; consumed once by the pipeline."""
    path: Path
    discovery_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class EncodedArtifact:
    """PNG bytes plus the UTC last-write time of the source (millisecond precision)."""
    png: bytes
    source_timestamp: datetime


@dataclass(frozen=True)
class TrackedProcess:
    pid: int
    window_handle: int
    window_class: str
