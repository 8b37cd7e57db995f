"""Exception types raised by the scene core.

Errors fall into three groups:

- ``MatrixSizeError``: operands with incompatible shapes.
- ``ContractError`` and its subclasses: a caller broke a documented
  precondition (index out of range, querying a hit that was never recorded,
  asking a mesh for a whole-object centroid, ...). These are always checked.
- ``MeshLoadError``: a mesh description could not be parsed.

Each concrete error also derives from the closest built-in exception so
callers can catch ``IndexError``/``ValueError``/``LookupError`` generically.
"""


class SceneCoreError(Exception):
    """Base class for every error raised by this package."""


class MatrixSizeError(SceneCoreError, ValueError):
    """Raised when matrix operand shapes do not fit the operation.

    Attributes:
        operation: Name of the operation that failed (e.g. "multiply").
        left_shape: (rows, cols) of the left operand.
        right_shape: (rows, cols) of the right operand, if there is one.
    """

    def __init__(
        self,
        operation: str,
        left_shape: tuple[int, int],
        right_shape: tuple[int, int] | None = None,
    ) -> None:
        self.operation = operation
        self.left_shape = left_shape
        self.right_shape = right_shape
        if right_shape is None:
            message = f"Invalid matrix size {left_shape} for {operation}"
        else:
            message = f"Invalid matrix sizes {left_shape} and {right_shape} for {operation}"
        super().__init__(message)


class ContractError(SceneCoreError, RuntimeError):
    """A documented precondition of an operation was violated."""


class MatrixIndexError(ContractError, IndexError):
    """Row or column index outside the matrix."""


class InvalidBoundsError(ContractError, ValueError):
    """Bounding box corners with min greater than max on some axis."""


class PartIndexError(ContractError, IndexError):
    """Part index outside ``[0, num_parts)``."""


class NotDivisibleError(ContractError):
    """Per-part query on an object that is not divisible into parts."""


class CentroidUndefinedError(ContractError):
    """Whole-object centroid requested where none is defined."""


class NoHitError(ContractError, LookupError):
    """Hit information requested before any hit was recorded."""


class MeshStateError(ContractError):
    """Mesh operation attempted in a state that does not support it."""


class MeshLoadError(SceneCoreError, ValueError):
    """A mesh description could not be parsed.

    Attributes:
        line_number: 1-based line where parsing failed, or None.
        line: The offending line with surrounding whitespace removed, or None.
    """

    def __init__(self, message: str, line_number: int | None = None, line: str | None = None) -> None:
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
            if line is not None:
                message = f"{message} ({line!r})"
        super().__init__(message)
