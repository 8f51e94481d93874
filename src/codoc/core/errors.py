class CodocError(Exception):
    """Base class for errors raised by the CoDoc engine."""


class CodocSyntaxError(CodocError, ValueError):
    def __init__(self, message: str, column: int = 0) -> None:
        super().__init__(message)
        self.column = column


class LexError(CodocSyntaxError):
    pass


class ParseError(CodocSyntaxError):
    pass


class IncompleteInputError(CodocSyntaxError):
    """A bare marker such as ``$`` or ``@@``: the line is still being typed."""


class SnapshotError(CodocError):
    pass
