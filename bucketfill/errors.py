class FillError(ValueError):
    """Base class for errors raised by bucketfill."""


class OutOfBoundsError(FillError, IndexError):
    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"({x}, {y}) is outside the {width}x{height} buffer")
        self.x: int = x
        self.y: int = y


class InvalidBufferError(FillError):
    pass


class InvalidRequestError(FillError):
    pass
