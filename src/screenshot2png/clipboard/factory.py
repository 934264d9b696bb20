import platform
from typing import Type

from screenshot2png.clipboard.base import ScreenshotClipboard


def get_clipboard_class() -> Type[ScreenshotClipboard]:
    system = platform.system()

    if system == "Windows":
        from screenshot2png.clipboard.windows import WindowsClipboard
        return WindowsClipboard
    elif system == "Linux":
        from screenshot2png.clipboard.linux import LinuxClipboard
        return LinuxClipboard
    elif system == "Darwin":
        from screenshot2png.clipboard.macos import MacOSClipboard
        return MacOSClipboard
    else:
        raise NotImplementedError(f"Platform '{system}' is not supported")


def get_clipboard() -> ScreenshotClipboard:
    clipboard_class = get_clipboard_class()
    return clipboard_class()
