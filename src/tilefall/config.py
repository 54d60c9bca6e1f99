from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from tilefall.constants import (
    COLOR_RGB,
    DEFAULT_PALETTE,
    FADE_DURATION,
    FALL_DURATION,
    GRID_SIZE,
    ROTATE_DURATION,
    TRANSITION_TIMEOUT,
)


@dataclass(frozen=True)
class GameConfig:
    """Construction-time settings for a session; never mutated while playing."""

    grid_size: int = GRID_SIZE
    palette: Tuple[str, ...] = DEFAULT_PALETTE
    colors: Dict[str, Tuple[int, int, int]] = field(default_factory=lambda: dict(COLOR_RGB))
    transition_timeout: Optional[float] = TRANSITION_TIMEOUT
    fade_duration: float = FADE_DURATION
    fall_duration: float = FALL_DURATION
    rotate_duration: float = ROTATE_DURATION
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if int(self.grid_size) < 1:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        palette = tuple(self.palette)
        object.__setattr__(self, "palette", palette)
        if not palette:
            raise ValueError("palette must contain at least one color")
        if len(set(palette)) != len(palette):
            raise ValueError(f"palette colors must be distinct: {palette}")
        missing = [name for name in palette if name not in self.colors]
        if missing:
            raise ValueError(f"no display color defined for {missing}")
        for name in ("fade_duration", "fall_duration", "rotate_duration"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.transition_timeout is not None:
            if self.transition_timeout <= 0:
                raise ValueError("transition_timeout must be positive or None")
            longest = max(self.fade_duration, self.fall_duration, self.rotate_duration)
            if self.transition_timeout <= longest:
                raise ValueError(
                    f"transition_timeout ({self.transition_timeout}s) must exceed the longest "
                    f"animation duration ({longest}s)"
                )
