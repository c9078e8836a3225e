"""
Exception types for Tile Draw.

Configuration problems are detected before any geometry work, output
problems are raised by the drawing sink, and invariant violations mark a
logic defect in the subdivision rules.
"""


class ConfigurationError(ValueError):
    """Invalid option, palette, table or range supplied by the user."""


class OutputError(OSError):
    """The output destination could not be opened or written."""


class SubdivisionInvariantError(RuntimeError):
    """A subdivision rule reached a state that valid triangles never produce."""
