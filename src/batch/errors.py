"""
Fatal pipeline errors.

Per-row and per-file problems are absorbed by the parsers and the runner;
only these escalate to the caller.
"""


class PipelineError(Exception):
    """Base class for errors that abort a pipeline run."""


class InputRootError(PipelineError):
    """Raised when the input root is missing or unreadable."""

    def __init__(self, root: str, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Input root '{root}' {reason}")


class ArtifactWriteError(PipelineError):
    """Raised when the output artifact cannot be written. No partial file is left behind."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write artifact '{path}': {reason}")
