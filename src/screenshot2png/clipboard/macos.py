import logging

try:
    from AppKit import NSPasteboard, NSPasteboardTypePNG, NSPasteboardTypeTIFF
    from Foundation import NSData
    HAS_APPKIT = True
except ImportError:
    HAS_APPKIT = False

from screenshot2png.clipboard.base import ScreenshotClipboard, png_to_tiff

logger = logging.getLogger(__name__)


class MacOSClipboard(ScreenshotClipboard):

    def _set_screenshot(self, png: bytes) -> bool:
        if not HAS_APPKIT:
            logger.warning("pyobjc is not installed, clipboard disabled")
            return False

        tiff = png_to_tiff(png)

        pasteboard = NSPasteboard.generalPasteboard()
        pasteboard.clearContents()
        pasteboard.setData_forType_(
            NSData.dataWithBytes_length_(tiff, len(tiff)), NSPasteboardTypeTIFF)
        pasteboard.setData_forType_(
            NSData.dataWithBytes_length_(png, len(png)), NSPasteboardTypePNG)
        return True
