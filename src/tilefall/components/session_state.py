from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Set

from tilefall.components.grid import Position
from tilefall.components.rotation import RotationDirection


class SessionPhase(Enum):
    IDLE = auto()
    BUSY = auto()
    COMPLETED = auto()


class PendingStage(Enum):
    """Which presentation transition a busy session is waiting on."""
    REMOVAL = auto()
    ROTATION = auto()
    FALL = auto()


@dataclass(slots=True)
class SessionState:
    """Singleton component tracking the running session and its animation lock."""

    started: bool = False
    phase: SessionPhase = SessionPhase.IDLE
    move_count: int = 0
    start_time: float = 0.0
    pending: Optional[PendingStage] = None
    # Positions still waiting for a settle acknowledgement in the pending stage.
    outstanding: Set[Position] = field(default_factory=set)
    region: List[Position] = field(default_factory=list)
    direction: Optional[RotationDirection] = None
    # Seconds spent waiting on the current pending stage.
    busy_elapsed: float = 0.0
    last_elapsed: Optional[float] = None

    @property
    def locked(self) -> bool:
        return self.phase is SessionPhase.BUSY

    def elapsed_at(self, now: float) -> float:
        """Seconds played so far; frozen once the session has completed."""
        if not self.started:
            return 0.0
        if self.last_elapsed is not None:
            return self.last_elapsed
        return max(0.0, now - self.start_time)
