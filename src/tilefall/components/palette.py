from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from tilefall.constants import EMPTY_RGB

RGB = Tuple[int, int, int]


@dataclass(slots=True)
class Palette:
    """Ordered color identifiers for a session plus their display colors.

    Lives on the board entity next to the Grid; spawning draws from ``names``.
    """
    names: List[str]
    colors: Dict[str, RGB] = field(default_factory=dict)

    def rgb_for(self, name: str | None) -> RGB:
        if name is None:
            return EMPTY_RGB
        return self.colors[name]
