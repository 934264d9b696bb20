from screenshot2png.clipboard.base import ScreenshotClipboard
from screenshot2png.clipboard.factory import get_clipboard

__all__ = [
    'ScreenshotClipboard',
    'get_clipboard',
]
