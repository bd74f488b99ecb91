"""
Custom exceptions for the ant colony clique solver.
"""


class AntCliqueError(Exception):
    """Base exception for ant colony clique solver errors."""
    pass


class FormatError(AntCliqueError, ValueError):
    """Raised when a graph or solution file does not follow the expected format."""
    pass


class TruncatedGraphError(FormatError, OSError):
    """Raised when the adjacency payload of a binary graph file ends early."""
    pass


class ConfigError(AntCliqueError, ValueError):
    """Raised when solver parameters are invalid."""
    pass
