from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from screenshot2png.utils.retry import RetryPolicy

LAUNCHER_WINDOW_CLASS = "ArenaNet"
GAME_CLIENT_WINDOW_CLASS = "ArenaNet_Dx_Window_Class"


class AppSettings(BaseModel):
    input_dir: Path
    output_dir: Optional[Path] = None
    convert_existing: bool = True
    use_clipboard: bool = True
    watch_pattern: str = "gw*.bmp"
    backfill_pattern: str = "gw*.bmp"
    conversion_retry_delay: float = Field(default=0.1, gt=0)
    deletion_retry_delays: List[float] = Field(default_factory=lambda: [0.5, 1.0, 5.0])
    startup_grace_period: float = Field(default=20.0, ge=0)
    lookup_retry_delay: float = Field(default=1.0, gt=0)
    window_classes: List[str] = Field(
        default_factory=lambda: [LAUNCHER_WINDOW_CLASS, GAME_CLIENT_WINDOW_CLASS])
    drain_timeout: float = Field(default=10.0, ge=0)
    unidentified_attempts: int = Field(default=30, ge=1)

    @model_validator(mode="after")
    def _default_output_dir(self) -> "AppSettings":
        if self.output_dir is None:
            self.output_dir = self.input_dir
        return self

    def conversion_policy(self) -> RetryPolicy:
        return RetryPolicy(delays=(self.conversion_retry_delay,), unbounded=True)

    def deletion_policy(self) -> RetryPolicy:
        return RetryPolicy(delays=tuple(self.deletion_retry_delays), unbounded=False)

    def lookup_policy(self) -> RetryPolicy:
        return RetryPolicy.forever(self.lookup_retry_delay)
