from dataclasses import dataclass

from tilefall.components.rotation import RotationDirection

@dataclass(slots=True)
class RotateAnimation:
    direction: RotationDirection
    progress: float = 0.0  # 0..1

    @property
    def angle(self) -> float:
        """Current board rotation in degrees, clockwise positive."""
        sign = 1.0 if self.direction is RotationDirection.RIGHT else -1.0
        return sign * 90.0 * self.progress
