"""Workstream scanner - pattern scanning and categorisation reports for codebases."""

__version__ = "0.3.0"
