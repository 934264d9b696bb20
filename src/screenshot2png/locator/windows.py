from typing import List, Optional, Sequence

import win32gui
import win32process

from screenshot2png.locator.base import ProcessLocator
from screenshot2png.models.screenshot import TrackedProcess


class WindowsProcessLocator(ProcessLocator):

    def find_by_window_class(self, class_names: Sequence[str]) -> Optional[TrackedProcess]:
        wanted = set(class_names)
        matches: List[TrackedProcess] = []

        def enum_callback(hwnd, results):
            try:
                class_name = win32gui.GetClassName(hwnd)
            except Exception:
                return True
            if class_name in wanted:
                _, pid = win32process.GetWindowThreadProcessId(hwnd)
                results.append(TrackedProcess(pid=pid, window_handle=hwnd, window_class=class_name))
                # Stop at the first match.
                return False
            return True

        try:
            win32gui.EnumWindows(enum_callback, matches)
        except Exception:
            # EnumWindows reports an error when the callback stops enumeration.
            if not matches:
                raise

        return matches[0] if matches else None
