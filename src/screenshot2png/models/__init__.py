from screenshot2png.models.screenshot import EncodedArtifact, ScreenshotEvent, TrackedProcess
from screenshot2png.models.settings import AppSettings

__all__ = [
    'AppSettings',
    'EncodedArtifact',
    'ScreenshotEvent',
    'TrackedProcess',
]
