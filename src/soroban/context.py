from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StepCtx:
    value: int            # running total before this step
    index: int            # 0-based step number
    target_length: int
    max_value: int        # Rmax of the active mode

    @property
    def is_last(self) -> bool:
        return self.index >= self.target_length - 1
