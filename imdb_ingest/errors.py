"""
Exception types raised by the ingestion pipeline.

Every stage failure is fatal to the run; the CLI catches PipelineError at the
top level and exits with a nonzero status.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for all ingestion failures."""

    def __init__(self, message: str, dataset: Optional[str] = None):
        super().__init__(message)
        self.dataset = dataset


class FetchError(PipelineError):
    """Network failure, non-success response, or failed local write."""


class DecompressError(PipelineError):
    """Decompression could not be run or reported failure."""


class SchemaError(PipelineError):
    """Header could not be read or yielded no columns."""


class LoadError(PipelineError):
    """The store rejected the DDL or the bulk import."""

    def __init__(
        self, message: str, dataset: Optional[str] = None, output: str = ""
    ):
        super().__init__(message, dataset)
        self.output = output


class WorkspaceError(PipelineError):
    """Working directory could not be created or removed."""
