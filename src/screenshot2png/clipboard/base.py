import io
import logging
from abc import ABC, abstractmethod

from PIL import Image

logger = logging.getLogger(__name__)

BMP_FILE_HEADER_SIZE = 14


def png_to_rgb(png: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(png))

    if image.mode == "RGBA":
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[3])
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def png_to_dib(png: bytes) -> bytes:
    """Device-independent bitmap: a BMP file without its 14 byte file header."""
    output = io.BytesIO()
    png_to_rgb(png).save(output, "BMP")
    return output.getvalue()[BMP_FILE_HEADER_SIZE:]


def png_to_tiff(png: bytes) -> bytes:
    output = io.BytesIO()
    Image.open(io.BytesIO(png)).save(output, "TIFF")
    return output.getvalue()


class ScreenshotClipboard(ABC):
    """Places a screenshot on the system clipboard as a native bitmap and as PNG."""

    @abstractmethod
    def _set_screenshot(self, png: bytes) -> bool:
        pass

    def set_screenshot(self, png: bytes) -> bool:
        try:
            return self._set_screenshot(png)
        except Exception as e:
            logger.error(f"Failed to set clipboard: {e}")
            return False
