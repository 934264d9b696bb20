import logging
import time

import win32clipboard as wc
import win32con

from screenshot2png.clipboard.base import ScreenshotClipboard, png_to_dib

logger = logging.getLogger(__name__)

PNG_FORMAT_NAME = "PNG"


class WindowsClipboard(ScreenshotClipboard):

    def _set_screenshot(self, png: bytes) -> bool:
        dib = png_to_dib(png)

        opened = False
        try:
            for _ in range(3):
                try:
                    wc.OpenClipboard()
                    opened = True
                    break
                except Exception:
                    time.sleep(0.05)

            if not opened:
                logger.warning("Clipboard is held by another application")
                return False

            # Both formats are set inside one open/close so readers never
            # observe only half of the screenshot. The data stays on the
            # clipboard after this thread ends.
            wc.EmptyClipboard()
            wc.SetClipboardData(win32con.CF_DIB, dib)
            wc.SetClipboardData(wc.RegisterClipboardFormat(PNG_FORMAT_NAME), png)
            return True
        finally:
            if opened:
                try:
                    wc.CloseClipboard()
                except Exception as e:
                    logger.warning(f"Failed to close clipboard: {e}")
