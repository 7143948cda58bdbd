"""
Exception hierarchy for jobgraph.

Layout failures never reach the caller of the engine: they are raised inside
an algorithm, converted into an Err at the engine boundary and masked by the
grid fallback. Ingestion failures do reach the caller.
"""


class JobGraphError(Exception):
    """Base class for all jobgraph errors."""


class InvalidFormatError(JobGraphError):
    """The input document is not a valid job list."""


class LayoutError(JobGraphError):
    """A layout algorithm could not produce positions."""

    def __init__(self, algorithm: str, message: str):
        super().__init__(f"{algorithm}: {message}")
        self.algorithm = algorithm


class LayoutTimeoutError(LayoutError):
    """A layout algorithm exceeded its time budget."""
