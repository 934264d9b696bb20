"""Service layer for screenshot2png."""

from screenshot2png.services.bulk_converter import BulkConverter
from screenshot2png.services.clipboard_publisher import ClipboardPublisher
from screenshot2png.services.conversion import (
    ConversionError,
    ConversionPipeline,
    PermanentConversionError,
    TransientConversionError,
    UnidentifiedSourceError,
)
from screenshot2png.services.process_supervisor import ProcessSupervisor, SupervisorState
from screenshot2png.services.screenshot_service import ScreenshotService
from screenshot2png.services.watcher import ScreenshotWatcher

__all__ = [
    "BulkConverter",
    "ClipboardPublisher",
    "ConversionError",
    "ConversionPipeline",
    "PermanentConversionError",
    "ProcessSupervisor",
    "ScreenshotService",
    "ScreenshotWatcher",
    "SupervisorState",
    "TransientConversionError",
    "UnidentifiedSourceError",
]
