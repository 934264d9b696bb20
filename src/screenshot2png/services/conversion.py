import io
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from screenshot2png.models.screenshot import EncodedArtifact
from screenshot2png.utils.file_times import EPOCH, apply_source_timestamp

logger = logging.getLogger(__name__)

# Anything shorter cannot hold a bitmap file header plus info header.
MIN_IMAGE_BYTES = 54


class ConversionError(Exception):
    pass


class TransientConversionError(ConversionError):
    """The source may still be written to; retrying later can succeed."""


class PermanentConversionError(ConversionError):
    """The source is gone or could never be decoded; retrying will not help."""


class UnidentifiedSourceError(TransientConversionError):
    """Pillow cannot identify the data yet.

    A bitmap whose header is still being written looks the same as a file that
    is not an image at all, so callers decide how often to retry before giving up.
    """


def read_source_timestamp(source_path: Path) -> datetime:
    """Last-write time of ``source_path`` in UTC, truncated to milliseconds."""
    mtime_ns = source_path.stat().st_mtime_ns
    return EPOCH + timedelta(milliseconds=mtime_ns // 1_000_000)


def format_timestamp(timestamp: datetime) -> str:
    return f"{timestamp:%Y-%m-%d_%H-%M-%S}.{timestamp.microsecond // 1000:03d}"


class ConversionPipeline:

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def destination_for(self, timestamp: datetime) -> Path:
        return self.output_dir / f"{format_timestamp(timestamp)}.png"

    def convert(self, source_path: Path) -> Tuple[Path, EncodedArtifact]:
        source_path = Path(source_path)
        logger.info(f"Processing {source_path}")

        png = self._reencode(source_path)

        # Last-write rather than creation time: creation time survives a
        # delete-and-recreate of the same name on some filesystems.
        try:
            timestamp = read_source_timestamp(source_path)
        except FileNotFoundError as e:
            raise PermanentConversionError(f"{source_path} disappeared: {e}") from e
        except OSError as e:
            raise TransientConversionError(f"Cannot stat {source_path}: {e}") from e

        destination = self.destination_for(timestamp)
        logger.info(f"Saving {destination}")

        try:
            destination.write_bytes(png)
            apply_source_timestamp(destination, timestamp)
        except OSError as e:
            raise TransientConversionError(f"Cannot write {destination}: {e}") from e

        return destination, EncodedArtifact(png=png, source_timestamp=timestamp)

    def _reencode(self, source_path: Path) -> bytes:
        # Read everything up front so no handle stays open on the source.
        try:
            data = source_path.read_bytes()
        except FileNotFoundError as e:
            raise PermanentConversionError(f"{source_path} disappeared: {e}") from e
        except OSError as e:
            raise TransientConversionError(f"Cannot read {source_path}: {e}") from e

        if len(data) < MIN_IMAGE_BYTES:
            raise TransientConversionError(
                f"{source_path} is incomplete ({len(data)} bytes)")

        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                output = io.BytesIO()
                image.save(output, format="PNG")
        except UnidentifiedImageError as e:
            raise UnidentifiedSourceError(f"Cannot identify {source_path}: {e}") from e
        except (OSError, SyntaxError, ValueError) as e:
            raise TransientConversionError(f"Cannot decode {source_path}: {e}") from e

        return output.getvalue()
