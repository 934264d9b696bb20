import logging
from pathlib import Path
from typing import List

from screenshot2png.services.conversion import ConversionError, ConversionPipeline

logger = logging.getLogger(__name__)


class BulkConverter:
    """One-time backfill of files that were already in the input directory.

    No retries, no clipboard and no deletion: a file that fails is logged
    and skipped.
    """

    def __init__(self, pipeline: ConversionPipeline, input_dir: Path, pattern: str) -> None:
        self.pipeline = pipeline
        self.input_dir = Path(input_dir)
        self.pattern = pattern

    def candidates(self) -> List[Path]:
        return sorted(path for path in self.input_dir.glob(self.pattern) if path.is_file())

    def run(self) -> List[Path]:
        logger.info(f"Converting existing screenshots matching {self.pattern}...")

        converted: List[Path] = []
        for candidate in self.candidates():
            try:
                destination, _ = self.pipeline.convert(candidate)
            except (ConversionError, OSError) as e:
                logger.error(f"Skipping {candidate}: {e}")
                continue
            converted.append(destination)

        logger.info(f"Done! Converted {len(converted)} existing screenshot(s)")
        return converted
