from screenshot2png.locator.base import ProcessLocator
from screenshot2png.locator.factory import get_process_locator

__all__ = [
    'ProcessLocator',
    'get_process_locator',
]
