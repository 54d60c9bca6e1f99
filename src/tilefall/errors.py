class BoundsError(IndexError):
    """Raised when a grid accessor is given a position outside the board."""

    def __init__(self, row: int, col: int, dimension: int):
        super().__init__(f"position ({row}, {col}) outside {dimension}x{dimension} grid")
        self.row = row
        self.col = col
        self.dimension = dimension
