"""CI platform integration (GitHub Actions)."""

from .workflow import WorkflowFiles, format_output

__all__ = ["WorkflowFiles", "format_output"]
