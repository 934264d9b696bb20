import logging
import os
import platform
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_ns(timestamp: datetime) -> int:
    delta = timestamp - EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1_000


def apply_source_timestamp(path: Path, timestamp: datetime) -> None:
    """Set modification, access and (on Windows) creation time of ``path``."""
    ns = to_epoch_ns(timestamp)
    os.utime(path, ns=(ns, ns))

    if platform.system() == "Windows":
        _set_windows_creation_time(path, timestamp)


def _set_windows_creation_time(path: Path, timestamp: datetime) -> None:
    import pywintypes
    import win32con
    import win32file

    handle = win32file.CreateFile(
        str(path),
        win32con.GENERIC_WRITE,
        win32con.FILE_SHARE_READ | win32con.FILE_SHARE_WRITE,
        None,
        win32con.OPEN_EXISTING,
        win32con.FILE_ATTRIBUTE_NORMAL,
        None,
    )
    try:
        file_time = pywintypes.Time(timestamp)
        win32file.SetFileTime(handle, file_time, file_time, file_time, UTCTimes=True)
    finally:
        handle.Close()
    logger.debug(f"Set creation time of {path} to {timestamp.isoformat()}")
