#!/usr/bin/env python3

import argparse
import logging
import os
import signal
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from screenshot2png.clipboard import ScreenshotClipboard
from screenshot2png.locator import ProcessLocator, get_process_locator
from screenshot2png.models.settings import AppSettings
from screenshot2png.services import (
    BulkConverter,
    ClipboardPublisher,
    ConversionPipeline,
    ProcessSupervisor,
    ScreenshotService,
    ScreenshotWatcher,
)

logger = logging.getLogger(__name__)


class Screenshot2PngApp:

    def __init__(
        self,
        settings: AppSettings,
        locator: Optional[ProcessLocator] = None,
        clipboard: Optional[ScreenshotClipboard] = None,
    ):
        self.settings = settings
        self.locator = locator
        self.clipboard = clipboard
        self.publisher: Optional[ClipboardPublisher] = None
        self.service: Optional[ScreenshotService] = None
        self.watcher: Optional[ScreenshotWatcher] = None
        self.supervisor: Optional[ProcessSupervisor] = None
        self.running = False

    def prepare_directories(self) -> None:
        for label, directory in (("Input", self.settings.input_dir), ("Output", self.settings.output_dir)):
            if directory.is_dir():
                continue

            logger.info(f"{label} directory '{directory}' does not exist. Creating...")
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Failed to create {label.lower()} directory: {e}")
                raise

    def start(self) -> None:
        if self.running:
            return

        settings = self.settings
        self.running = True

        try:
            self.prepare_directories()

            pipeline = ConversionPipeline(settings.output_dir)

            if settings.convert_existing:
                BulkConverter(pipeline, settings.input_dir, settings.backfill_pattern).run()

            if settings.use_clipboard:
                self.publisher = ClipboardPublisher(self.clipboard, auto_start=True)

            self.service = ScreenshotService(
                pipeline,
                conversion_policy=settings.conversion_policy(),
                deletion_policy=settings.deletion_policy(),
                publisher=self.publisher,
                unidentified_attempts=settings.unidentified_attempts,
            )

            self.watcher = ScreenshotWatcher(
                settings.input_dir, settings.watch_pattern, self.service.submit)
            self.watcher.start()

            self.supervisor = ProcessSupervisor(
                self.locator or get_process_locator(),
                settings.window_classes,
                grace_period=settings.startup_grace_period,
                lookup_policy=settings.lookup_policy(),
            )
            self.supervisor.start()
        except Exception:
            self.stop()
            raise

    def stop(self) -> None:
        if not self.running:
            return

        self.running = False

        if self.watcher:
            self.watcher.stop()

        if self.supervisor:
            self.supervisor.stop()

        if self.service:
            self.service.drain(self.settings.drain_timeout)

        if self.publisher:
            self.publisher.stop()

        logger.info("screenshot2png stopped")

    def run_forever(self) -> None:
        self.start()

        try:
            while self.running and not self.supervisor.wait(timeout=1.0):
                continue
        except KeyboardInterrupt:
            logger.info("Stopping...")
        finally:
            self.stop()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="screenshot2png - Convert game screenshots to timestamped PNG files"
    )

    parser.add_argument(
        "input_dir",
        metavar="input-dir",
        type=Path,
        help="Directory from which the screenshot bitmaps are read"
    )

    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=os.getenv("SCREENSHOT2PNG_OUTPUT_DIR") or None,
        help="Directory in which converted screenshots are saved (default: input-dir)"
    )

    parser.add_argument(
        "--convert-existing",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Convert screenshots that already exist at startup (default: on)"
    )

    parser.add_argument(
        "--use-clipboard",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Copy the newest screenshot to the clipboard (default: on)"
    )

    parser.add_argument(
        "--backfill-pattern",
        type=str,
        default=os.getenv("SCREENSHOT2PNG_BACKFILL_PATTERN", "gw*.bmp"),
        help="File pattern converted at startup (default: gw*.bmp)"
    )

    parser.add_argument(
        "--grace-period",
        type=float,
        default=_env_float("SCREENSHOT2PNG_GRACE_PERIOD", 20.0),
        help="Seconds to wait for the game when it is not running at startup (default: 20)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> AppSettings:
    return AppSettings(
        input_dir=args.input_dir,
        output_dir=args.output_dir,
        convert_existing=args.convert_existing,
        use_clipboard=args.use_clipboard,
        backfill_pattern=args.backfill_pattern,
        startup_grace_period=args.grace_period,
    )


def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv()

    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    args = parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        settings = build_settings(args)
    except ValidationError as e:
        logger.error(f"Invalid settings: {e}")
        sys.exit(2)

    app = Screenshot2PngApp(settings)

    def signal_handler(signum, frame):
        app.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        app.run_forever()
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
