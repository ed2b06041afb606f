"""
Error Taxonomy
==============
All exceptions raised by brush evaluation derive from `ManifoldBrushError`,
so the reactive coordinator can catch them at one boundary.

Some errors also derive from the matching built-in type (KeyError,
ValueError, IndexError) so callers that only know the built-ins still work.
"""


class ManifoldBrushError(Exception):
    """Base class for all brush/kernel evaluation errors."""


class ConfigurationError(ManifoldBrushError):
    """A required collaborator is missing at evaluation time."""


class MissingManifoldError(ConfigurationError):
    pass


class MissingBrushError(ConfigurationError):
    pass


class MissingKernelModelError(ConfigurationError):
    pass


class MissingSpectralBasisError(ConfigurationError):
    pass


class PathNotComputedError(ConfigurationError):
    """A path index was requested before any path was computed."""


class NoPathFoundError(ManifoldBrushError):
    """Source and target lie in disconnected components."""

    def __init__(self, source: int, target: int) -> None:
        super().__init__(f"No path between vertex {source} and vertex {target}.")
        self.source = source
        self.target = target


class InvalidKernelTypeError(ManifoldBrushError, KeyError):
    def __init__(self, kernel_type: str) -> None:
        super().__init__(f"Unknown kernel type: '{kernel_type}'")
        self.kernel_type = kernel_type

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the plain message
        return str(self.args[0])


class InvalidSelectionModeError(ManifoldBrushError, ValueError):
    pass


class InvalidVertexError(ManifoldBrushError, IndexError):
    pass


class InvalidPathIndexError(InvalidVertexError):
    pass
