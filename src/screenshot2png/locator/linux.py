import shutil
import subprocess
from typing import Collection, List, Optional, Sequence

from screenshot2png.locator.base import ProcessLocator
from screenshot2png.models.screenshot import TrackedProcess

# xdotool exits with status 1 when a search or query has no result.
XDOTOOL_NO_MATCH = 1


class LinuxProcessLocator(ProcessLocator):
    """Uses xdotool, which matches WM_CLASS; Wine maps window classes onto it.

    Failures of xdotool itself propagate so they are never mistaken for the
    application having exited.
    """

    def find_by_window_class(self, class_names: Sequence[str]) -> Optional[TrackedProcess]:
        if not shutil.which("xdotool"):
            raise FileNotFoundError("xdotool is not available, cannot locate windows")

        for class_name in class_names:
            for window_id in self._search(class_name):
                pid = self._window_pid(window_id)
                if pid is not None:
                    return TrackedProcess(pid=pid, window_handle=window_id, window_class=class_name)
        return None

    def _search(self, class_name: str) -> List[int]:
        output = self._run_command(
            ["xdotool", "search", "--class", f"^{class_name}$"],
            no_match_codes=(XDOTOOL_NO_MATCH,))
        if not output:
            return []
        return [int(line) for line in output.split() if line.strip().isdigit()]

    def _window_pid(self, window_id: int) -> Optional[int]:
        # The window may have closed since the search.
        output = self._run_command(
            ["xdotool", "getwindowpid", str(window_id)],
            no_match_codes=(XDOTOOL_NO_MATCH,))
        if output and output.strip().isdigit():
            return int(output.strip())
        return None

    def _run_command(
        self,
        command: List[str],
        timeout: float = 2.0,
        no_match_codes: Collection[int] = (),
    ) -> Optional[str]:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
        )
        if result.returncode in no_match_codes:
            return None
        if result.returncode != 0:
            raise subprocess.CalledProcessError(
                result.returncode, command, output=result.stdout, stderr=result.stderr)
        return result.stdout.decode("utf-8", errors="ignore")
