import platform
from typing import Type

from screenshot2png.locator.base import ProcessLocator


def get_process_locator_class() -> Type[ProcessLocator]:
    system = platform.system()

    if system == "Windows":
        from screenshot2png.locator.windows import WindowsProcessLocator
        return WindowsProcessLocator
    elif system == "Linux":
        from screenshot2png.locator.linux import LinuxProcessLocator
        return LinuxProcessLocator
    else:
        raise NotImplementedError(f"Platform '{system}' is not supported")


def get_process_locator() -> ProcessLocator:
    locator_class = get_process_locator_class()
    return locator_class()
