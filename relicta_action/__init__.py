"""GitHub Action runner for the relicta release-automation tool."""

__version__ = "1.0.0"
