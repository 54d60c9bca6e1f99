from enum import Enum


class RotationDirection(Enum):
    """Quarter-turn direction for the whole board."""
    LEFT = "left"    # counter-clockwise
    RIGHT = "right"  # clockwise
